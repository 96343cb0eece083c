# cairn

Building blocks for a build tool that understands C++20 modules: reading a
source file's module declaration and imports, a small preprocessor for
conditions and definitions, module maps loaded from `modules.yaml`, and
helpers for starting compiler processes.

## Installation

    pip install .

For running the tests:

    pip install ".[test]"
    pytest

## What is inside

- `cairn.scanner` — `scan_string(text)` reads the preamble of a C++ source
  and returns a `SourceInfo` with `name`, `type` (a `ModuleType`),
  `required` and `exported`, the last two lists of `Reference(type, name)`.
  Partition imports such as `import :detail;` are qualified with the module's
  own name; `import "x.h";` and `import <x>;` become user and system header
  references. Scanning stops at the first declaration that is not an import.
- `cairn.module_type` — the `ModuleType` enum (`INTERFACE`, `IMPLEMENTATION`,
  `PARTITION`, `SOURCE`, `SYSTEM_HEADER`, `USER_HEADER`), the `SourceDef`
  dataclass, and the predicates `generates_bmi`, `generates_object` and
  `is_header_module`.
- `cairn.preprocessor` — `Preprocessor` with `append_includes`,
  `define_symbol`, `undef_symbol`, `is_defined`, `process_text(cur_dir, text,
  mode)` and `run(workdir, src_file)`. It follows `#if`, `#ifdef`, `#ifndef`,
  `#else` and `#endif`, records `#define` and `#undef` (function-like macros
  included), and reads `#include` files to collect their definitions. An
  `#elif` line ends a branch but does not change which branch is active; only
  `#else` does. Active lines are copied with comments removed and continued
  lines joined; macros are expanded only inside conditions. `ScanMode`
  (`SKIP`, `COLLECT`, `COPY`) and `Command` name the modes and directives.
- `cairn.pp_tokens` — `tokenize(text)` yields `Token(type, content)` items
  for a directive line, and `evaluate(tokens)` computes a constant expression
  with 64-bit signed arithmetic; unknown identifiers count as 0 and division
  by zero gives 0.
- `cairn.module_resolver` — `load_map(directory)` reads the directory's
  `modules.yaml`, scans the directory when there is none, or reads the file
  it is given; it returns a `ResolverResult` with `files`, `targets` and
  `env`. `scan_directory` and `process_yaml` are the two halves;
  `process_yaml` raises `ValueError` naming the file when it cannot be read
  or is malformed. `match_prefix(prefix, name)` tells whether a module name
  falls under a prefix (empty matches all, a trailing `%` matches any name
  starting with the rest, otherwise equal or followed by `.`), and
  `detect_change(env, threshold)` reports whether the configuration file was
  modified after a timestamp or has gone.
- `cairn.origin_env` — `OriginEnv` (config file, working directory, settings
  hash, includes, options, module maps) with `OriginEnv.default_env()`, and
  `ModuleMapItem(prefix, paths)`.
- `cairn.process` — `Process.spawn(path, workdir, args, flags, env)` starts a
  program in a working directory, with pipes chosen by `StreamFlags`
  (`INPUT`, `OUTPUT`, `ERROR` and their combinations) and an optional
  `SystemEnvironment`. A relative `path` is taken relative to `workdir`, not
  searched for on `PATH`. `waitpid_status()` waits and returns a wait status
  that `os.WIFEXITED` and friends read; `kill_child(sig)` sends a signal.
  A `Process` is also a context manager that closes its pipes and waits.
- `cairn.environment` — `SystemEnvironment`, a key-ordered snapshot of
  environment variables: `current()`, `parse()` for `env -0` output
  (`SET` output on Windows), `posix_format()`, `to_windows_format()`, and
  lookup by key returning an empty string for unset variables.
- Utilities: `cairn.simple_json` (`parse`, `serialize`, `ParseError`;
  numbers are floats written with twelve significant digits),
  `cairn.thread_pool` (`ThreadPool` with `push`, `start`, `stop`, usable as
  a context manager), `cairn.version` (`Version` for dotted numeric
  versions where missing parts count as zero, and `APP_VERSION`),
  `cairn.log` (`Log`, `Level`; callable arguments are evaluated only when a
  message is emitted), `cairn.arguments` (`CliReader`, `CliItem`,
  `append_arguments`), `cairn.utf8` (`decode_utf8`, `encode_utf8`,
  `decode_utf16_unknown_order`) and `cairn.hashing` (`hash_combine`).

## Example

```python
from cairn.scanner import scan_string

info = scan_string("export module app.core;\nimport <vector>;\nimport :detail;\n")
print(info.name, info.type)          # app.core interface
for ref in info.required:
    print(ref.type, ref.name)        # system_header vector / partition app.core:detail
```

## modules.yaml

A `modules.yaml` may hold these keys, all optional:

```yaml
work_dir: ..
files: [main.cpp, core.cppm]
includes: [include]
options: [-DNDEBUG]
prefixes:
  app: src/app
  lib: [src/lib, vendor/lib]
targets:
  bin/app: main.cpp
```

Paths are relative to the file's directory, or to `work_dir` when it is
given. When `files` is missing, the working directory is scanned for `.cpp`,
`.cppm` and `.ixx` files. Each target becomes a pair of paths, key first.
A scanned directory turns each subdirectory into a prefix of the same name.

## What it does not do

The package is a library and has no command of its own. It does not work out
a build order, run a full build, keep a database of compiled modules, or
write makefiles or build scripts; those are left to the program that uses
these pieces.