# porytools

porytools prepares Porytiles command lines for compiling and decompiling
tilesets in Generation III decomp projects.

It keeps the options Porytiles needs in a JSON settings file. These are the
executable, the behaviors header, the palette mode, the target game, the
layer mode, the transparency colour and the colour-assignment tuning. From
these settings it builds the command for each of the four operations:

- `compile-primary`
- `compile-secondary`
- `decompile-primary`
- `decompile-secondary`

## What it does not do

- porytools only prints commands. It never runs Porytiles, so paste the
  output into a shell or a build script.
- It has no graphical interface and shows no preview of compiled tiles.
- It emits no fieldmap-override options and no warning options. Only the
  options listed below appear in the generated commands.

## Installation

```
pip install porytools
```

Python 3.10 or later is required. There are no runtime dependencies.

## Command line

```
porytools KIND [options]
```

`KIND` is one of the four operations above. The command prints that
operation's Porytiles command line on standard output. For
`decompile-secondary` it also prints a warning on standard error, because
Porytiles does not support that operation yet.

### Settings file

| Option | Effect |
| --- | --- |
| `--settings FILE` | Start from the settings stored in `FILE`. Without it, the defaults are used. |
| `--save` | Write the settings back to `FILE`, with any options given on the command line applied. Needs `--settings`. With `--save`, a missing file is created. |

If the settings file cannot be read or is not valid, the command prints the
error and exits with status 1.

### Paths

| Option | Sets |
| --- | --- |
| `--porytiles PATH` | the Porytiles executable |
| `--behaviors-header PATH` | the behaviors header file |
| `--output PATH` | the output folder of the chosen operation |
| `--source PATH` | the source folder (`compile-primary`, `compile-secondary`) |
| `--compiled PATH` | the compiled tileset (`decompile-primary`, `decompile-secondary`) |
| `--partner-primary PATH` | the partner primary tileset (`compile-secondary`, `decompile-secondary`) |

Giving a path option to an operation that does not use it is an error.

### Tileset options

| Option | Values |
| --- | --- |
| `--palette-mode` | `true-color` or `greyscale` |
| `--base-game` | `pokeemerald`, `pokefirered` or `pokeruby` |
| `--dual-layer` / `--triple-layer` | the layer mode |
| `--transparency R,G,B` | the colour as three numbers from 0 to 1; each is multiplied by 255 in the command |
| `--default-behavior` | for example `MB_NORMAL` |

### Colour assignment

| Option | Values |
| --- | --- |
| `--assign-explore-cutoff` | an integer |
| `--assign-algorithm` | `dfs` or `bfs` |
| `--best-branches` | text, for example `4` |
| `--primary-assign-explore-cutoff`, `--primary-assign-algorithm`, `--primary-best-branches` | the same settings for the paired primary set, used by `compile-secondary` |

### Path style

| Option | Effect |
| --- | --- |
| `--relative-to BASE` | Write every path relative to `BASE`, with forward slashes. An empty path stays empty. |
| `--absolute` | Write paths as given. |
| `--wsl-absolute` / `--no-wsl-absolute` | With relative paths, put a leading `/` in front of each one, or leave it off. |

For example:

```
porytools compile-primary --settings porytiles.json --save \
    --porytiles ./porytiles --behaviors-header include/constants/metatile_behaviors.h \
    --source tilesets/primary/src --output data/tilesets/primary/general
```

Run `porytools --help` for the full list of options.

## Library use

- `porytools.context.PorytilesContext` is a dataclass that holds the working
  state. Every field except the paths has a default:
  - `palette_mode="greyscale"`
  - `base_game="pokeemerald"`
  - `use_dual_layer=False`
  - `transparency=(1.0, 0.0, 1.0)`
  - `default_behavior="MB_NORMAL"`
  - `assign_explore_cutoff=2` and `primary_assign_explore_cutoff=2`
  - `assign_algorithm="dfs"` and `primary_assign_algorithm="dfs"`
  - `best_branches="4"` and `primary_best_branches="4"`

  The paths default to empty strings.
- `porytools.command_generator.PorytilesCommandGenerator` turns a context
  into a command string. Its methods are:
  - `generate_compile_primary_command`
  - `generate_compile_secondary_command`
  - `generate_decompile_primary_command`
  - `generate_decompile_secondary_command`

  Its fields are `should_use_relative_paths`, `should_wsl_fake_absolute` and
  `relative_base_path`. `path_string` and `options` return the pieces the
  commands are built from.
- `porytools.settings.PorytilesSettings` bundles these objects:
  - a `context`
  - a `command_generator`
  - `default_source_path`
  - `default_output_path`

  `dumps()` returns the settings as JSON text, and
  `PorytilesSettings.loads(text)` reads them back. `command(kind)` returns
  the command for a `porytools.settings.Command` member or its string value.
  `Command.supported` is `False` only for `DECOMPILE_SECONDARY`.

```python
from porytools.settings import Command, PorytilesSettings

with open("porytiles.json", encoding="utf-8") as handle:
    settings = PorytilesSettings.loads(handle.read())

settings.context.base_game = "pokefirered"
print(settings.command(Command.COMPILE_SECONDARY))
```

## Settings format

The settings document is a JSON object with these members:

- `porytilesContext` is an object holding the context fields, in this order:
  - `porytilesExecutableFile`
  - `behaviorsHeaderPath`
  - `paletteMode`
  - `baseGame`
  - `useDualLayer`
  - `transparency_R`, `transparency_G`, `transparency_B`
  - `defaultBehavior`
  - `assignExploreCutoff`
  - `assignAlgorithm`
  - `bestBranches`
  - the per-operation paths
  - the `primary...` assignment settings
- `commandGenerator` holds `shouldUseRelativePaths`,
  `shouldWslFakeAbsolute` and `relativeBasePath`.
- `defaultSourcePath` and `defaultOutputPath` are strings.

The loader accepts a file whose members are in a different order, for
example one edited by hand. A member that is missing, or that holds a value
of the wrong type, raises `porytools.json_output.ArchiveError`. In that case
the settings object is left unchanged.

## The archive format

The settings are written and read through a node-based JSON archive:

- `porytools.json_output.JSONOutputArchive(stream, options)` writes to a
  text stream. It finishes the document on `close()` or when a `with` block
  ends.
  - `OutputOptions` sets `precision`, `indent_char` (an `IndentChar`) and
    `indent_length`.
  - `OutputOptions.default()` indents with four spaces.
  - `OutputOptions.no_indent()` keeps the line breaks but adds no
    indentation.
- `porytools.json_input.JSONInputArchive(stream)` reads a document back.

The archive follows these rules:

- A named value becomes an object member.
- A value with no name is called `value0`, `value1`, and so on.
- A node marked with `make_array()` becomes a JSON array, and its items have
  no names.
- Bytes are stored as base64. Use `save_binary_value` and
  `load_binary_value`.
- When a name is given on loading and it is not the next member, the member
  is looked up at the current level, and reading goes on from there.

`porytools.serialize` provides helpers for your own structures: `save`,
`load`, `save_node`, `load_node`, `save_sequence` and `load_sequence`.

```python
import io

from porytools.json_input import JSONInputArchive
from porytools.json_output import JSONOutputArchive, OutputOptions
from porytools.serialize import load, save

buffer = io.StringIO()
with JSONOutputArchive(buffer, OutputOptions.default()) as archive:
    save(archive, "pokeemerald", "baseGame")
print(buffer.getvalue())
# {
#     "baseGame": "pokeemerald"
# }

with JSONInputArchive(io.StringIO(buffer.getvalue())) as archive:
    assert load(archive, "baseGame") == "pokeemerald"
```

`porytools.stdtypes` writes and reads more kinds of values as members of
the current node. Wrap these calls in `save_node` and `load_node`.

| Kind | Functions | Layout |
| --- | --- | --- |
| bitset | `save_bitset`, `load_bitset` | a `type` (see `BitsetEncoding`) and `data` |
| pair | `save_pair`, `load_pair` | `first` and `second` |
| tuple | `save_tuple`, `load_tuple` | `tuple_element0`, `tuple_element1`, … |
| variant | `save_variant`, `load_variant` | `index` and `data` |
| mapping | `save_map`, `load_map` | an array of `{"key": …, "value": …}` objects; on loading, the first of equal keys is kept |

## Running the tests

```
pip install "porytools[test]"
pytest
```