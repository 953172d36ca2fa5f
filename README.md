# docforge

docforge provides the pieces for assembling a documentation bundle from
documents spread across repositories. It resolves the names of the nodes in a
documentation structure, rewrites the links inside documents, completes their
front matter, and offers workers that download linked resources, write GitHub
info and check that links can be reached.

The package uses only the standard library.

## Modules

- `docforge.config`: the `Hugo` and `Options` dataclasses that hold build
  settings. `Hugo` holds `enabled`, `pretty_urls`, `base_url` and
  `index_file_names`.
- `docforge.manifest`:
  - `resolve_node_names(nodes, registry, hugo)` evaluates name expressions
    (`$name`, `$uuid`, `$ext`, with `$name$ext` as the default) through the
    resource handler that the registry returns for a node's source. In Hugo
    mode it renames nodes that have `index: true` to `_index.md`, and it makes
    every document name end in `.md`. It raises `LookupError` when no handler
    accepts a source.
  - `resolve_section_files(container, hugo)` renames the first document whose
    name matches one of the configured index file names to `_index.md`,
    unless the container already has one.
  - `match_front_matter_rule(path, value, data)` and `match_path(path_pattern,
    path)` match front-matter values at JSONPath-like paths (`.a.b`, `.a[1]`,
    one `**` wildcard). `is_visited(visited, path)` checks a stack of visited
    manifests.
- `docforge.links`: `LinkResolver` rewrites a link in one of three ways. A
  link to a document of the structure becomes a relative path between nodes,
  found through `SourceLocations`. An embeddable resource is scheduled for
  download under the resources root. Anything else becomes an absolute link
  and is queued for validation. In Hugo mode it also produces pretty or ugly
  URLs. The helpers are `download_embeddable`, `find_visible_node`,
  `swap_paths` and `build_download_destination`.
- `docforge.frontmatter`: `FrontmatterProcessor.process` lays node and
  parent-section front matter over a document's and adds a title made from
  the node name when none is given. `aggregate_frontmatter` merges the front
  matter of several documents; where documents share a key, the earliest
  document wins.
- `docforge.reader`: `GenericReader.read(source)` reads through the handler
  that the registry returns for the source. With `is_github_info` set it reads
  the GitHub info instead. `ResourceNotFoundError` marks resources that are
  missing.
- `docforge.downloader`: `DownloadScheduler.schedule` puts a `DownloadTask` on
  a queue and raises `SchedulingError` when the queue refuses it.
  `DownloadWorker` (made by `download_work_func`) downloads each distinct
  source only once. It logs missing resources and does not raise for them.
- `docforge.github_info`: `GitHubInfo.write_github_info` queues a
  `GitHubInfoTask`. `GitHubInfoWorker` (made by `github_info_worker_func`)
  joins the info of a node's sources and writes it.
- `docforge.validator`: `Validator.validate_link` queues a `ValidationTask`.
  `ValidatorWorker` (made by `validate_worker_func`) skips sample hosts and
  links it has already checked. It sends `HEAD` and falls back to `GET`
  through any client with a `request(method, url)` method. `do_validation`
  retries on HTTP 429 and honours a `Retry-After` of up to five minutes.
- `docforge.document_worker`: `DocumentWorker` renders a document node
  through a content processor, writes the result and asks for its GitHub info.
- `docforge.build`: `document_tasks(nodes)` lists a `DocumentWorkTask` for
  every node in depth-first order. `collect_errors(queues)` gathers the
  `errors` of task queues.

## Example

```python
from docforge.links import build_download_destination, swap_paths
from docforge.manifest import match_front_matter_rule, match_path

# A path that goes down the tree is preferred to one that goes up.
assert swap_paths("../a/b.md", "./b.md")

assert build_download_destination(None, "image.png", "/__resources") == "/__resources/image.png"

assert match_front_matter_rule(".a.b", 1, {"a": {"b": 1}})
assert match_path(".a.**.c", ".a.x.y.c")
```

## What it does not do

docforge has no command-line program and does not run a full build on its
own. It contains no markdown parser or renderer, no resource handlers for any
particular host, no task queue and no writers. Those are passed in as objects
(a registry with `get(uri)`, readers with `read(source)`, writers with
`write(name, path, content, node)`, queues with `add_task(task)`, and an HTTP
client with `request(method, url)`).

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```