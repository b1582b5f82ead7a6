# rustyworld

An interpreter for the data files of the classic game *Another World*.
It reads the game's resource index (`memlist.bin`) and bank files,
unpacks compressed resources, and runs the game's bytecode on a small
virtual machine with 64 cooperative channels. The bytecode draws
polygons, text and backgrounds into four 320x200 16-colour video pages,
which are shown in a `pygame` window scaled by three.

## Installing

```
pip install .
```

## Game data

You need the original DOS data files: `memlist.bin` and the `bankXX`
files (`bank01`, `bank02`, ...), together in one directory.

## Running

```
rustyworld --data-dir ./another_world
```

`--data-dir` (short form `-d`) defaults to `./another_world`. The game
starts with the second game part. Close the window to quit. If the data
cannot be loaded or the bytecode fails, the error is logged and the
command exits with status 1.

## What it does not do

- There is no sound: the sound and music opcodes are read from the
  bytecode and otherwise ignored.
- There is no player input: the window only reacts to being closed, and
  no key, mouse or joystick state is passed to the game.

## Using it as a library

- `rustyworld.resource.ResourceRegistry` reads `memlist.bin`
  (`read_entries`), loads and unpacks single entries (`load_entry`) and
  assembles the segments of a game part (`setup_part`).
- `rustyworld.bank.unpack` decompresses a packed bank resource;
  `rustyworld.bank.read_bank` reads one entry from its bank file.
- `rustyworld.parts` defines `GamePart`, `Segment` and
  `segment_indices`.
- `rustyworld.renderer.Renderer` holds the 16-colour palette and turns a
  page into scaled `0xRRGGBB` pixels (`scale_page`) for any display
  object with a `size` and a `present(pixels)` method.
- `rustyworld.video.Video` keeps the four video pages and draws
  polygons (`read_and_draw_polygon`), strings (`draw_string`) and
  backgrounds (`copy_bg`) into them.
- `rustyworld.vm.Vm` executes the bytecode of a loaded part; each
  `host_frame` call runs every ready channel until it yields or dies.
- `rustyworld.engine.Engine` ties everything together in the main loop,
  and `rustyworld.engine.WindowDisplay` is the `pygame` window.

```python
from pathlib import Path
from rustyworld.resource import ResourceRegistry
from rustyworld.parts import GamePart

registry = ResourceRegistry(Path("another_world"))
registry.read_entries()
part = registry.setup_part(GamePart.TWO)
print(len(part.bytecode.getvalue()))
```

## Tests

```
pip install .[test]
pytest
```