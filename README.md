# vlrutil

vlrutil is a set of small utilities for applications. It has no runtime dependencies.

## Modules

- `vlrutil.option_value` has the class `SpecifiedValue`, which is one value given for an option together with its `OptionSourceInfo`. The value can be read back as `str`, `int`, `float` or `bool`:
  - `convert_to` converts the value. It raises `ConversionError` when the value cannot be converted.
  - `extract_as` returns the value unchanged if it already has the requested type, and converts it otherwise.
  - `cache_as` stores the converted value, and `cached_value` reads it back.

  Option names are hierarchical and are split at `:` and `.`, so `section.name` and `section:name` name the same option. The helpers are `option_name_elements` and `names_match`. Matching ignores case.
- `vlrutil.app_options` has the class `AppOptions`, a thread-safe store of specified values.
  - `add` stores a value and returns True when it replaced a value with the same name.
  - `find_by_name` looks a value up by the exact name it was given under.
  - `find_matching` returns every value whose name matches a normalized name.
  - `resolve(name, type)` chooses the first matching value that converts to the type and caches it as the prepared value. Later calls return that prepared value. `prepared` and `clear_prepared` read and reset it.
  - `set_qualifiers` attaches qualifiers to an option.
  - `shared_app_options()` returns the instance shared by the whole process.
- `vlrutil.option_file` has the class `OptionFileReader`, which reads `name = value` lines into an `AppOptions`. Blank lines and lines that begin with `#` are skipped. A value in double quotes is used as written, and anything after the closing quote is ignored. For an unquoted value, a `#` starts a trailing comment.
- `vlrutil.regex_cache` has the class `RegexCache`. It compiles each pattern once. For a pattern that fails to compile it logs a warning and returns `None`. `shared_regex_cache()` returns the shared cache.
- `vlrutil.shared_instance` has `SharedInstanceRegistrar`, which holds named instances:
  - `get_or_create` returns the instance with that name, creating it if needed.
  - `set`, `clear`, `clear_all` and `cached` manage the held instances.

  `get_shared_instance(cls)` returns the instance of a class from the shared registrar, creating it on first use.
- `vlrutil.thread_context` keeps a stack of named operation contexts for each thread. `add_operation_context(name, value)` pushes a context and returns a `ContextLifetime`, which pops the context when it is closed or when its `with` block ends. `shared_thread_context().current_contexts()` lists the top context of each name for the current thread.
- `vlrutil.close_enough` provides `levenshtein_distance`, a Levenshtein distance with weights. `CloseEnough.evaluate` ranks candidate strings, closest first, by edit distance to a starting value. Inserting or removing a character costs 0.8, changing a character costs 1.0, and case is ignored.
- `vlrutil.platform_info` has the functions `is_windows`, `is_linux`, `is_apple`, `is_64bit`, `is_debug_build` and `is_debugger_attached`. `is_debug_build` is false under `python -O`. `is_debugger_attached` is true when a trace function is set.
- `vlrutil.formatting` does printf-style formatting:
  - `formatpf(fmt, *args)` formats the arguments and returns a result of the same type as the format string.
  - `format_to(type, fmt, *args)` converts the result to the given type. It converts between `str` and `bytes` as UTF-8.
- `vlrutil.capture` captures data written to file descriptors 1 and 2:
  - `ConsoleCapture` captures both streams when used as a context manager. `scoped(flags)` and `begin`/`end` accept `CaptureFlags` to choose which streams are captured.
  - `stdout_analysis()` and `stderr_analysis()` return a `CaptureAnalysis` with `lines`, `find_line`, `contains` and `contains_sequence`.
  - `set_data_callback` sends the captured bytes to a callback instead of storing them.
- `vlrutil.config_options` has two classes:
  - `CommandLine` holds an argument list, taken from `set_from_args` or from `set_from_os`, which uses `sys.argv`.
  - `ConfigOptions` runs an `argparse.ArgumentParser` that you supply over a `CommandLine`. Options registered with `add_flag` and `add_string` are recorded into `values`, and unrecognised arguments are collected in `unrecognized`.

## Examples

Read options from a file:

```python
from vlrutil.app_options import AppOptions
from vlrutil.option_file import OptionFileReader

options = AppOptions()
OptionFileReader(options).read_file("app.conf")

value = options.resolve("server.port", int)
if value is not None:
    print(value.cached_value(int))
```

Rank near matches:

```python
from vlrutil.close_enough import CloseEnough

ranked = CloseEnough().evaluate("colour", ["color", "collar", "column"])
print([c.ending_value for c in ranked])
```

Tag work in the current thread:

```python
from vlrutil.thread_context import add_operation_context, shared_thread_context

with add_operation_context("request", "42"):
    print([c.value for c in shared_thread_context().current_contexts()])
```

Capture console output:

```python
from vlrutil.capture import ConsoleCapture

capture = ConsoleCapture()
with capture:
    print("hello")
print(capture.stdout_analysis().contains("hello"))
```

## What it does not do

vlrutil is a library only and installs no command.

`ConfigOptions` does not define command-line options itself. You build the `argparse` parser, and it records the results.

Option files are the only source that is read from disk. Other sources must create `SpecifiedValue` objects and add them to `AppOptions`.

## Install and test

```
pip install .[test]
pytest
```