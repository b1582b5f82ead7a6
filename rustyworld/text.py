"""The in-game string table and the 8x8 bitmap font."""

from __future__ import annotations

STRING_TABLE: dict[int, bytes] = {
    0x001: b"P E A N U T  3000",
    0x002: b"1990 Peanut Computer, Inc.\n\n\nCDOS Version 5.01",
    0x003: b"2",
    0x004: b"3",
    0x005: b".",
    0x006: b"A",
    0x007: b"@",
    0x008: b"PEANUT 3000",
    0x00A: b"R",
    0x00B: b"U",
    0x00C: b"N",
    0x00D: b"P",
    0x00E: b"R",
    0x00F: b"O",
    0x010: b"J",
    0x011: b"E",
    0x012: b"C",
    0x013: b"T",
    0x014: b"Shield 9A.5f Ok",
    0x015: b"Flux % 5.0177 Ok",
    0x016: b"CDI Vector ok",
    0x017: b" %%%ddd ok",
    0x018: b"Race-Track ok",
    0x019: b"SYNCHROTRON",
    0x01A: (
        b"E: 23%\ng: .005\n\nRK: 77.2L\n\nopt: g+\n\n Shield:\n1: OFF\n2: ON\n3: ON\n\n"
        b"P~: 1\n"
    ),
    0x01B: b"ON",
    0x01C: b"-",
    0x021: b"|",
    0x022: b"--- Theoretical study ---",
    0x023: b" THE EXPERIMENT WILL BEGIN IN    SECONDS",
    0x024: b"  20",
    0x025: b"  19",
    0x026: b"  18",
    0x027: b"  4",
    0x028: b"  3",
    0x029: b"  2",
    0x02A: b"  1",
    0x02B: b"  0",
    0x02C: b"L E T ' S   G O",
    0x031: b"- Phase 0:\nINJECTION of particles\ninto synchrotron",
    0x032: b"- Phase 1:\nParticle ACCELERATION.",
    0x033: b"- Phase 2:\nEJECTION of particles\non the shield.",
    0x034: b"A  N  A  L  Y  S  I  S",
    0x035: (
        b"- RESULT:\nProbability of creating:\n ANTIMATTER: 91.V %\n"
        b" NEUTRINO 27:  0.04 %\n NEUTRINO 424: 18 %\n"
    ),
    0x036: b"   Practical verification Y/N ?",
    0x037: b"SURE ?",
    0x038: (
        b"MODIFICATION OF PARAMETERS\nRELATING TO PARTICLE\n"
        b"ACCELERATOR (SYNCHROTRON)."
    ),
    0x039: b"       RUN EXPERIMENT ?",
    0x03C: b"t---t",
    0x03D: b"000 ~",
    0x03E: b".20x14dd",
    0x03F: b"gj5r5r",
    0x040: b"tilgor 25%",
    0x041: b"12% 33% checked",
    0x042: b"D=4.2158005584",
    0x043: b"d=10.00001",
    0x044: b"+",
    0x045: b"*",
    0x046: b"% 304",
    0x047: b"gurgle 21",
    0x048: b"{{{{",
    0x049: b"Delphine Software",
    0x04A: b"By Eric Chahi",
    0x04B: b"  5",
    0x04C: b"  17",
    0x12C: b"0",
    0x12D: b"1",
    0x12E: b"2",
    0x12F: b"3",
    0x130: b"4",
    0x131: b"5",
    0x132: b"6",
    0x133: b"7",
    0x134: b"8",
    0x135: b"9",
    0x136: b"A",
    0x137: b"B",
    0x138: b"C",
    0x139: b"D",
    0x13A: b"E",
    0x13B: b"F",
    0x13C: b"        ACCESS CODE:",
    0x13D: b"PRESS BUTTON OR RETURN TO CONTINUE",
    0x13E: b"   ENTER ACCESS CODE",
    0x13F: b"   INVALID PASSWORD !",
    0x140: b"ANNULER",
    0x141: b"      INSERT DISK ?\n\n\n\n\n\n\n\n\nPRESS ANY KEY TO CONTINUE",
    0x142: b" SELECT SYMBOLS CORRESPONDING TO\n THE POSITION\n ON THE CODE WHEEL",
    0x143: b"    LOADING...",
    0x144: b"              ERROR",
    0x15E: b"LDKD",
    0x15F: b"HTDC",
    0x160: b"CLLD",
    0x161: b"FXLC",
    0x162: b"KRFK",
    0x163: b"XDDJ",
    0x164: b"LBKG",
    0x165: b"KLFB",
    0x166: b"TTCT",
    0x167: b"DDRX",
    0x168: b"TBHK",
    0x169: b"BRTD",
    0x16A: b"CKJL",
    0x16B: b"LFCK",
    0x16C: b"BFLX",
    0x16D: b"XJRT",
    0x16E: b"HRTB",
    0x16F: b"HBHK",
    0x170: b"JCGB",
    0x171: b"HHFL",
    0x172: b"TFBB",
    0x173: b"TXHF",
    0x174: b"JHJL",
    0x181: b" BY",
    0x182: b"ERIC CHAHI",
    0x183: b"         MUSIC AND SOUND EFFECTS",
    0x184: b" ",
    0x185: b"JEAN-FRANCOIS FREITAS",
    0x186: b"IBM PC VERSION",
    0x187: b"      BY",
    0x188: b" DANIEL MORAIS",
    0x18B: b"       THEN PRESS FIRE",
    0x18C: b" PUT THE PADDLE ON THE UPPER LEFT CORNER",
    0x18D: b"PUT THE PADDLE IN CENTRAL POSITION",
    0x18E: b"PUT THE PADDLE ON THE LOWER RIGHT CORNER",
    0x258: b"      Designed by ..... Eric Chahi",
    0x259: b"    Programmed by...... Eric Chahi",
    0x25A: b"      Artwork ......... Eric Chahi",
    0x25B: b"Music by ........ Jean-francois Freitas",
    0x25C: b"            Sound effects",
    0x25D: b"        Jean-Francois Freitas\n             Eric Chahi",
    0x263: b"              Thanks To",
    0x264: (
        b"           Jesus Martinez\n\n          Daniel Morais\n\n"
        b"        Frederic Savoir\n\n      Cecile Chahi\n\n"
        b"    Philippe Delamarre\n\n  Philippe Ulrich\n\n"
        b"Sebastien Berthet\n\nPierre Gousseau"
    ),
    0x265: b"Now Go Out Of This World",
    0x190: b"Goodevening professor.",
    0x191: b"I see you have driven here in your\nFerrari.",
    0x192: b"IDENTIFICATION",
    0x193: b"AU BOULOT !!!\n",
    0x194: b"Y\n",
}

FIRST_CHAR = 0x20
GLYPH_HEIGHT = 8

FONT: bytes = bytes.fromhex(
    """
    00 00 00 00 00 00 00 00 10 10 10 10 10 00 10 00
    28 28 00 00 00 00 00 00 00 24 7E 24 24 7E 24 00
    08 3E 48 3C 12 7C 10 00 42 A4 48 10 24 4A 84 00
    60 90 90 70 8A 84 7A 00 08 08 10 00 00 00 00 00
    06 08 10 10 10 08 06 00 C0 20 10 10 10 20 C0 00
    00 44 28 10 28 44 00 00 00 10 10 7C 10 10 00 00
    00 00 00 00 00 10 10 20 00 00 00 7C 00 00 00 00
    00 00 00 00 10 28 10 00 00 04 08 10 20 40 00 00
    78 84 8C 94 A4 C4 78 00 10 30 50 10 10 10 7C 00
    78 84 04 08 30 40 FC 00 78 84 04 38 04 84 78 00
    08 18 28 48 FC 08 08 00 FC 80 F8 04 04 84 78 00
    38 40 80 F8 84 84 78 00 FC 04 04 08 10 20 40 00
    78 84 84 78 84 84 78 00 78 84 84 7C 04 08 70 00
    00 18 18 00 00 18 18 00 00 00 18 18 00 10 10 60
    04 08 10 20 10 08 04 00 00 00 FE 00 00 FE 00 00
    20 10 08 04 08 10 20 00 7C 82 02 0C 10 00 10 00
    30 18 0C 0C 0C 18 30 00 78 84 84 FC 84 84 84 00
    F8 84 84 F8 84 84 F8 00 78 84 80 80 80 84 78 00
    F8 84 84 84 84 84 F8 00 7C 40 40 78 40 40 7C 00
    FC 80 80 F0 80 80 80 00 7C 80 80 8C 84 84 7C 00
    84 84 84 FC 84 84 84 00 7C 10 10 10 10 10 7C 00
    04 04 04 04 84 84 78 00 8C 90 A0 E0 90 88 84 00
    80 80 80 80 80 80 FC 00 82 C6 AA 92 82 82 82 00
    84 C4 A4 94 8C 84 84 00 78 84 84 84 84 84 78 00
    F8 84 84 F8 80 80 80 00 78 84 84 84 84 8C 7C 03
    F8 84 84 F8 90 88 84 00 78 84 80 78 04 84 78 00
    7C 10 10 10 10 10 10 00 84 84 84 84 84 84 78 00
    84 84 84 84 84 48 30 00 82 82 82 82 92 AA C6 00
    82 44 28 10 28 44 82 00 82 44 28 10 10 10 10 00
    FC 04 08 10 20 40 FC 00 3C 30 30 30 30 30 3C 00
    3C 30 30 30 30 30 3C 00 3C 30 30 30 30 30 3C 00
    3C 30 30 30 30 30 3C 00 00 00 00 00 00 00 00 FE
    3C 30 30 30 30 30 3C 00 00 00 38 04 3C 44 3C 00
    40 40 78 44 44 44 78 00 00 00 3C 40 40 40 3C 00
    04 04 3C 44 44 44 3C 00 00 00 38 44 7C 40 3C 00
    38 44 40 60 40 40 40 00 00 00 3C 44 44 3C 04 78
    40 40 58 64 44 44 44 00 10 00 10 10 10 10 10 00
    02 00 02 02 02 02 42 3C 40 40 46 48 70 48 46 00
    10 10 10 10 10 10 10 00 00 00 EC 92 92 92 92 00
    00 00 78 44 44 44 44 00 00 00 38 44 44 44 38 00
    00 00 78 44 44 78 40 40 00 00 3C 44 44 3C 04 04
    00 00 4C 70 40 40 40 00 00 00 3C 40 38 04 78 00
    10 10 3C 10 10 10 0C 00 00 00 44 44 44 44 78 00
    00 00 44 44 44 28 10 00 00 00 82 82 92 AA C6 00
    00 00 44 28 10 28 44 00 00 00 42 22 24 18 08 30
    00 00 7C 08 10 20 7C 00 60 90 20 40 F0 00 00 00
    FE FE FE FE FE FE FE 00 38 44 BA A2 BA 44 38 00
    38 44 82 82 44 28 EE 00 55 AA 55 AA 55 AA 55 AA
    """
)


def get_string(string_id: int) -> bytes:
    """Return the text of ``string_id``; raise KeyError if there is none."""
    try:
        return STRING_TABLE[string_id]
    except KeyError:
        raise KeyError(f"unknown string id {string_id:#x}") from None


def glyph(char: int | str) -> bytes:
    """Return the eight row bitmaps of ``char``, most significant bit leftmost.

    Raises ValueError for characters the font has no glyph for.
    """
    code = ord(char) if isinstance(char, str) else char
    index = code - FIRST_CHAR
    offset = index * GLYPH_HEIGHT
    if index < 0 or offset + GLYPH_HEIGHT > len(FONT):
        raise ValueError(f"no glyph for character {code:#x}")
    return FONT[offset:offset + GLYPH_HEIGHT]