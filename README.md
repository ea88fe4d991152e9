# cubcaster

cubcaster draws a first-person view of a grid maze. It casts rays to find the
walls and textures them. The maze comes from a `.cub` scene file, and the
view is shown in a pygame window of 1366×768 pixels.

## Installation

```
pip install .
```

To run the tests, install the `test` extra and then run `pytest`:

```
pip install .[test]
pytest
```

## Running

```
cubcaster path/to/scene.cub
```

The command takes exactly one argument, which must be a file name ending in
`.cub`. If it gets any other number of arguments, it prints
`Invalid argument.` to standard error.

If the scene file or one of its textures cannot be used, the program prints
an error message to standard error. It then exits with status 1. When the
window is closed, the program prints `Window closed!` and exits with status 0.

## Scene files

A scene file starts with six elements. They may come in any order, and blank
lines may separate them. Each element line has its leading and trailing
whitespace removed.

```
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm
F 220,100,0
C 225,30,0
```

Each element may appear only once.

Texture paths (`NO`, `SO`, `WE`, `EA`):

- Every path must start with `./textures/`.
- The file must be readable.
- The images are XPM files.
- On screen, the four textures go to these walls:
  - `EA` on walls hit by a ray going down the map (towards larger y).
  - `NO` on walls hit by a ray going up the map (towards smaller y).
  - `WE` on walls hit by a ray going right.
  - `SO` on walls hit by a ray going left.

Colours (`F` for the floor, `C` for the ceiling):

- Each colour has exactly three values, separated by commas.
- Every value is a decimal number from 0 to 255.

The map follows the six elements:

```
111111
100101
1010N1
111111
```

- `1` is a wall.
- `0` is open floor.
- Exactly one of `N`, `S`, `E` or `W` marks the player's start. The letter also
  sets the direction the player faces.
- Spaces count as outside the map.
- The map must be closed. No open cell or player cell may touch the outside or
  the edge of the map.
- The map ends at the first blank line. Only blank lines may follow it.

## Controls

| Key | Action |
| --- | --- |
| W / S | move forward / back |
| A / D | strafe |
| Left / Right arrows | turn |
| Up / Down arrows | tilt the view up / down |
| Esc | quit |

Movement is blocked by walls.

## Library use

The modules can also be used on their own.

- `cubcaster.config`:
  - `load_scene(path)` reads a scene file into a `Scene`. A `Scene` holds the texture paths, the floor and ceiling colours, and a `CubeMap`.
  - `parse_scene(lines, check_files)` does the same from a list of lines.
- `cubcaster.xpm`:
  - `load_xpm(path)` decodes an XPM file into an `XpmImage`. Pixels are 0xAARRGGBB values; read one with `XpmImage.pixel(x, y)`.
  - `parse_xpm_source(text)` decodes XPM text.
  - Invalid images raise `XpmError`.
- `cubcaster.raycaster`: `Raycaster(grid, textures, floor, ceiling)` takes four textures in the order east, north, west, south.
  - `render(view, frame)` draws a `View` into a `Frame`.
  - `cast(view, angle)` follows a single ray and returns a `RayHit`.
- `cubcaster.player`:
  - `initial_view(grid, player)` gives the starting `View`.
  - A `Controller` applies the keys held in its `KeyState` to that view, once per call to `step()`.
- `cubcaster.errors.CubError`: every invalid scene, texture or argument raises this.

## Limits

- The window size is fixed.
- There is no mouse control.
- There is no minimap.
- There are no sprites.