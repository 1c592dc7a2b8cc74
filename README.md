# graphedit

A graph document toolkit: an in-memory graph model, readers for GraphML,
DOT and the GraphViz "plain" output format, a GraphML writer, an undo history
that stores compressed byte-level differences between snapshots, and the
bookkeeping a document editor needs (file-type registry, settings, recent
files, records of running instances).

## Installation

```
pip install .
```

## Modules

- `graphedit.graph`: the model — `Graph`, `Node`, `Edge`, `NodePort`,
  `AttrInfo`, the `AttrFlags` and `ValueType` enums, and
  `GraphFormatError`, raised when graph data cannot be read or written.
  `Graph.clear()` empties a graph; `Graph.find_node_index(node_id)` returns a
  node's index or -1.
- `graphedit.graphml`: `GraphMLFormat().load(file_name)` returns a `Graph`;
  `GraphMLFormat().save(file_name, graph)` writes one. Key declarations
  (`<key>`) become `AttrInfo` entries with typed defaults; `x_coordinate` /
  `y_coordinate` node data also set `x` / `y` multiplied by 1000.
- `graphedit.plaindot`: `PlainDotFormat` reads GraphViz plain output, from a
  file (`load`) or a string (`loads`). Coordinates and sizes are converted from
  inches to points and multiplied by the graph scale. Also `tokenize(lines)`,
  `split_port_id(node_id)` and `from_dot_node_shape(shape)`.
- `graphedit.dot`: `DotFormat` reads directed DOT graphs (`load` / `loads`),
  taking node colour, size, position, shape, stroke and label attributes and
  edge weight, direction, style and label attributes. Also `from_dot_shape`
  and `parse_font`.
- `graphedit.undo`: `DiffUndoManager(scene)` where `scene` has
  `store_state() -> bytes` and `restore_state(data)`. Methods: `add_state`,
  `undo`, `redo`, `revert_state`, `reset`, `available_undo_count`,
  `available_redo_count`.
- `graphedit.documents`: `DocumentFormat`, `Document` and `DocumentRegistry`
  (`add_document`, `documents`, `creatable_types`, `get`, `find_format`,
  `open_filter`, `save_filters`), plus `cut_last_suffix(file_name)`.
- `graphedit.session`: `Settings` (a key-value store kept as a JSON file),
  `RecentFiles` (newest first, 20 entries by default), `InstanceRegistry`
  (records of live application processes) and `DocumentSession`, which
  creates, opens and saves a document through a backend and keeps the title,
  recent files and instance record up to date.
- `graphedit.table`: `CellTable`, a sparse grid of text cells.
- `graphedit.csvpreview`: `CsvPreview.load(file_name, max_lines=10)` reads the
  first lines of a file; `table(separator)` splits them into a `CellTable`
  (`Delimiter.COMMA`, `SEMICOLON`, `TAB` or any string); `raw_text()` joins
  them.
- `graphedit.imageexport`: `ImageExportOptions` holds the export resolution
  and cropping, reads and writes them to `Settings`, and computes
  `target_size(scene_rect, items_rect)` in pixels.
- `graphedit.platform`: `platform_bits()`, `running_pids()`,
  `total_ram_bytes()`.
- `graphedit.app`: the document registries of the graph editor
  (`graph_editor_registry`) and the DOT assistant (`dot_assistant_registry`),
  their backends `GraphBackend` and `DotBackend`, `display_name`,
  `settings_path`, `about_text`, and `main`.

## Example

```python
from graphedit.graphml import GraphMLFormat
from graphedit.plaindot import PlainDotFormat

graph = PlainDotFormat().loads(
    "graph 1 2 2\n"
    "node a 1 1 0.5 0.5 A solid ellipse black white\n"
    "node b 2 1 0.5 0.5 B solid box black white\n"
    "edge a b 0 solid black\n"
    "stop\n"
)
print(graph.find_node_index("b"))   # 1
print(graph.edges[0].id)            # a-b

GraphMLFormat().save("out.graphml", graph)
loaded = GraphMLFormat().load("out.graphml")
print(len(loaded.nodes), len(loaded.edges))   # 2 1
```

## Command line

```
graphedit [--dot] [create <type> | open <file> | <file>]
```

It starts a document session, acts on the arguments and prints the document
title (`New File` for a new document, otherwise the file's full path). Without
`--dot` it is the graph editor (`create graph`); with `--dot` it is the DOT
assistant (`create graphviz`). Settings are kept as JSON in `qvge.ini`
(`qdot.ini` with `--dot`) beside the program if such a file exists there,
otherwise under the user's configuration directory in `qvge/`. On exit the
session's instance record is removed and the last used directory is stored.
The exit status is 1 if the document could not be created or opened.

## What it does not do

- There is no graphical editor: no windows, scene, drawing or interactive
  editing. The command only opens or creates a document and reports its title.
- Only GraphML can be written. DOT, plain DOT, XGR, GEXF, GML and CSV are not
  written; XGR, GEXF, GML and CSV are not read either, and opening them as a
  graph raises `GraphFormatError`.
- `DotFormat` reads directed graphs only and does not run GraphViz layout.
- `ImageExportOptions` computes the target size only; no image, PDF or SVG is
  produced.

## Running the tests

```
pip install .[test]
pytest
```