# bptools

Helpers for working with Terraform blueprint repositories:

- **Build timings**: read Cloud Build configuration files, filter build
  records and work out how long a given build step takes on average.
- **Blueprint catalog**: list the public Terraform blueprint repositories of
  the blueprint GitHub organisations as a table, CSV or documentation HTML.
- **Blueprint metadata helpers**: read titles, descriptions, architecture
  notes, cost and deployment-time estimates out of a blueprint's `README.md`,
  discover examples and sub-modules, read output types from Terraform state
  JSON, and merge hand-authored values (connections, output types, alternate
  defaults) into freshly built metadata objects.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Listing the blueprint catalog

The catalog command talks to the GitHub API and needs a token in the
`GITHUB_TOKEN` environment variable:

```
export GITHUB_TOKEN=token
bptools-catalog list
```

Options of `list`:

- `--format` selects the output: `table` (default), `csv` or `html`.
- `--sort` orders the repositories by `created` (default), `stars` or `name`.
- `--verbose` adds a description column to the table and CSV output. Setting
  the `VERBOSE` environment variable to a true value (`1`, `t`, `true`, ...)
  does the same.

The repositories of `terraform-google-modules` and `GoogleCloudPlatform` are
fetched. Archived repositories are left out; the others are kept when their
name starts with `terraform-google` (apart from `terraform-google-conversion`
and `terraform-google-examples`) or is `terraform-example-foundation`. The
`html` format produces the documentation table: only blueprints whose GitHub
topics map to a category are shown, end-to-end blueprints first, together with
two fixed entries that are not discovered from GitHub.

Without `GITHUB_TOKEN` the command logs an error and exits with status 1; it
does the same when fetching the repositories fails.

## Using the library

### Build step timings

```python
from bptools.builds import Build, load_build_file, build_step_ids, find_stage_durations
from bptools.durations import duration_avg

config = load_build_file("build/int.cloudbuild.yaml")
print(build_step_ids(config))

builds = [Build.from_dict(record) for record in records]  # records: dicts of build data
durations = find_stage_durations("apply", builds)
print(duration_avg(durations))
```

- `find_stage_durations` counts only steps with status `SUCCESS`, and
  truncates each duration to whole seconds. Step times are RFC 3339 strings.
- `duration_avg` returns the mean `timedelta`, or zero for an empty input.
- `filter_real_builds` keeps builds whose substitutions hold `COMMIT_SHA`,
  `REPO_NAME` and `TRIGGER_NAME`; `repo_filter("my-repo")` returns a filter
  keeping builds whose `REPO_NAME` is `my-repo`.
- `success_builds_between_filter(start, end)` returns the filter expression
  for successful builds created in `[start, end)`.
- `parse_date("01-31-2024")` reads an `MM-DD-YYYY` date as UTC midnight and
  raises `ValueError` for anything else.

`bptools.gitremote.repo_name(directory, remote="origin")` reads the git
configuration of a checkout (or bare repository), takes the first URL of the
remote and returns the last part of its `/owner/repo` path, so
`https://github.com/foo/bar` and `github.com/foo/bar/` both give `bar`. It
raises `RepoNameError` when the configuration cannot be read, the remote is
missing, or the path has another shape.

### Catalog rendering

```python
import sys
from bptools.github import GitHubService, SortOption, fetch_sorted_tf_repos
from bptools.render import RenderFormat, render

service = GitHubService.from_environment(["terraform-google-modules"])
repos = fetch_sorted_tf_repos(service, SortOption.parse("stars"))
render(repos, sys.stdout, RenderFormat.parse("csv"), verbose=True)
```

`GitHubService.from_environment` raises `RuntimeError` when `GITHUB_TOKEN` is
not set. `SortOption.parse` and `RenderFormat.parse` raise `ValueError` for
unknown names. `sort_repos` and `is_tf_repo` are available on their own, and
`repos_to_display_meta`, `doc_sort` and `render_doc_html` build the
documentation HTML from `DisplayMeta` records.

### README content

```python
from pathlib import Path
from bptools.markdown_content import (
    get_md_content,
    get_deployment_duration,
    get_cost_estimate,
    get_architecture_info,
)

readme = Path("README.md").read_bytes()
title = get_md_content(readme, 1, 1, "", False).literal
duration = get_deployment_duration(readme, "Deployment Duration")
cost = get_cost_estimate(readme, "Cost")
architecture = get_architecture_info(readme, "Architecture")
```

`get_md_content` finds a heading by level and order, or by its title (pass
`-1` as level and order to match by title alone). With `get_content` false it
returns the heading text; otherwise the first paragraph or list after it. When
nothing matches, `ContentNotFoundError` is raised.

`get_deployment_duration` reads lines such as `Configuration: 2 mins` and
`Deployment: 10 mins` into a `TimeEstimate` in seconds.

### Examples, modules and Terraform state

- `bptools.dirpaths.get_examples(path)` and `get_modules(path)` list the
  directories holding `.tf` files as `MiscContent` (name and location from
  `examples/` or `modules/` on), skipping `.terraform*` directories, sorted by
  name. `file_exists` raises for missing paths and for directories.
- `bptools.state_parser.parse_output_types_from_state(data)` reads the JSON of
  `terraform show -json` and returns the type of every output, `None` where
  an output has no type or no value. Malformed input raises
  `StateParseError`.
- `bptools.interfaces.update_output_types(interfaces, state_data)` applies
  those types to a `BlueprintInterface`; `merge_existing_connections` and
  `merge_existing_output_types` carry hand-authored values over from older
  interfaces, and `sort_blueprint_roles` orders `BlueprintRoles` by level,
  number of roles and first role.
- `bptools.display.build_ui_input_from_variables` adds `DisplayVariable`
  entries for variables that lack one, titled from their names (`foo_bar`
  becomes `Foo Bar`), and `merge_existing_alt_defaults` keeps authored
  alternate defaults.
- `bptools.repo.blueprint_root_path` and `submodule_name_kebab` resolve
  sub-module paths under `/modules` to their root blueprint and kebab-case
  name; `repo_name_from_readme` turns the README title into a name, and
  `repo_details_from_root` reads repository details from the root
  blueprint's `metadata.yaml`.

## What this package does not do

- It does not query Cloud Build: there is no command that lists builds or
  prints an average step time. You supply the build records yourself.
- It does not generate, write or validate `metadata.yaml` files, and has no
  metadata command. It does not read variables, outputs, versions, roles or
  services from Terraform `.tf` files, and it never runs Terraform; output
  types come only from state JSON you pass in.