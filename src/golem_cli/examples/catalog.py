"""The built-in example catalog used by ``new`` and ``list-examples``.

File paths and contents may contain these placeholders, replaced when an
example is instantiated:

* ``{{template-name}}`` — the template name as given.
* ``{{template_name}}`` — the template name with ``-`` replaced by ``_``.
* ``{{package-ns}}`` / ``{{package-name}}`` — the two halves of the
  package name; ``{{package_ns}}`` / ``{{package_name}}`` are the same
  with ``-`` replaced by ``_``.
"""

from __future__ import annotations

from golem_cli.examples.models import Example, ExampleFile, GuestLanguage

_WIT = """\
package {{package-ns}}:{{package-name}};

interface api {
  {{FUNCTIONS}}
}

world {{template-name}} {
  export api;
}
"""


def _wit(functions: str) -> ExampleFile:
    return ExampleFile(
        path="wit/{{template-name}}.wit",
        content=_WIT.replace("{{FUNCTIONS}}", functions),
    )


_HELLO_WIT = _wit("hello: func() -> string;")
_COUNTER_WIT = _wit("add: func(value: u64);\n  get: func() -> u64;")

_RUST_CARGO = """\
[package]
name = "{{template_name}}"
version = "0.0.1"
edition = "2021"

[lib]
crate-type = ["cdylib"]

[dependencies]
wit-bindgen = "0.16.0"

[package.metadata.component]
package = "{{package-ns}}:{{package-name}}"
"""

_GITIGNORE = ExampleFile(path=".gitignore", content="target/\nout/\nnode_modules/\n")


EXAMPLES: tuple[Example, ...] = (
    Example(
        name="rust-hello",
        language=GuestLanguage.RUST,
        description="A minimal Rust template returning a greeting.",
        files=(
            ExampleFile(path="Cargo.toml", content=_RUST_CARGO),
            ExampleFile(
                path="src/lib.rs",
                content="""\
cargo_component_bindings::generate!();

use bindings::exports::{{package-ns}}::{{package_name}}::api::Guest;

struct Component;

impl Guest for Component {
    fn hello() -> String {
        "Hello from {{template-name}}!".to_string()
    }
}
""",
            ),
            _HELLO_WIT,
            _GITIGNORE,
        ),
    ),
    Example(
        name="rust-counter",
        language=GuestLanguage.RUST,
        description="A stateful Rust template keeping a running total.",
        files=(
            ExampleFile(path="Cargo.toml", content=_RUST_CARGO),
            ExampleFile(
                path="src/lib.rs",
                content="""\
cargo_component_bindings::generate!();

use bindings::exports::{{package-ns}}::{{package_name}}::api::Guest;

struct State {
    total: u64,
}

static mut STATE: State = State { total: 0 };

fn with_state<T>(f: impl FnOnce(&mut State) -> T) -> T {
    unsafe { f(&mut STATE) }
}

struct Component;

impl Guest for Component {
    fn add(value: u64) {
        with_state(|state| state.total += value);
    }

    fn get() -> u64 {
        with_state(|state| state.total)
    }
}
""",
            ),
            _COUNTER_WIT,
            _GITIGNORE,
        ),
    ),
    Example(
        name="go-hello",
        language=GuestLanguage.GO,
        description="A minimal Go (TinyGo) template returning a greeting.",
        files=(
            ExampleFile(
                path="go.mod",
                content="module {{template_name}}\n\ngo 1.20\n",
            ),
            ExampleFile(
                path="main.go",
                content="""\
package main

import (
	api "{{template_name}}/{{template_name}}"
)

type Impl struct{}

func (i *Impl) Hello() string {
	return "Hello from {{template-name}}!"
}

func init() {
	api.SetExportsApi(&Impl{})
}

func main() {}
""",
            ),
            ExampleFile(
                path="Makefile",
                content="""\
build:
\twit-bindgen tiny-go --out-dir {{template_name}} ./wit
\ttinygo build -target=wasi -o {{template_name}}.wasm main.go
""",
            ),
            _HELLO_WIT,
            _GITIGNORE,
        ),
    ),
    Example(
        name="c-hello",
        language=GuestLanguage.C,
        description="A minimal C template returning a greeting.",
        files=(
            ExampleFile(
                path="main.c",
                content="""\
#include "{{template_name}}.h"

void exports_{{package_ns}}_{{package_name}}_api_hello({{template_name}}_string_t *ret) {
    {{template_name}}_string_set(ret, "Hello from {{template-name}}!");
}
""",
            ),
            ExampleFile(
                path="Makefile",
                content="""\
build:
\twit-bindgen c --autodrop-borrows yes ./wit
\t$(WASI_SDK_PATH)/bin/clang --sysroot $(WASI_SDK_PATH)/share/wasi-sysroot \\
\t  main.c {{template_name}}.c {{template_name}}_component_type.o \\
\t  -o {{template_name}}.wasm -mexec-model=reactor
""",
            ),
            _HELLO_WIT,
            _GITIGNORE,
        ),
    ),
    Example(
        name="js-hello",
        language=GuestLanguage.JS,
        description="A minimal JavaScript template returning a greeting.",
        files=(
            ExampleFile(
                path="package.json",
                content="""\
{
  "name": "{{template-name}}",
  "version": "0.0.1",
  "type": "module",
  "scripts": {
    "build": "jco componentize -w wit -o out/{{template_name}}.wasm src/main.js"
  },
  "devDependencies": {
    "@bytecodealliance/jco": "0.14.2",
    "@bytecodealliance/componentize-js": "0.5.0"
  }
}
""",
            ),
            ExampleFile(
                path="src/main.js",
                content="""\
export const api = {
  hello() {
    return "Hello from {{template-name}}!";
  },
};
""",
            ),
            _HELLO_WIT,
            _GITIGNORE,
        ),
    ),
    Example(
        name="ts-hello",
        language=GuestLanguage.TS,
        description="A minimal TypeScript template returning a greeting.",
        files=(
            ExampleFile(
                path="package.json",
                content="""\
{
  "name": "{{template-name}}",
  "version": "0.0.1",
  "type": "module",
  "scripts": {
    "build": "tsc && jco componentize -w wit -o out/{{template_name}}.wasm dist/main.js"
  },
  "devDependencies": {
    "@bytecodealliance/jco": "0.14.2",
    "@bytecodealliance/componentize-js": "0.5.0",
    "typescript": "^5.3.3"
  }
}
""",
            ),
            ExampleFile(
                path="src/main.ts",
                content="""\
export const api = {
  hello(): string {
    return "Hello from {{template-name}}!";
  },
};
""",
            ),
            ExampleFile(
                path="tsconfig.json",
                content="""\
{
  "compilerOptions": {
    "target": "ES2022",
    "module": "ES2022",
    "outDir": "dist",
    "strict": true
  },
  "include": ["src"]
}
""",
            ),
            _HELLO_WIT,
            _GITIGNORE,
        ),
    ),
    Example(
        name="python-hello",
        language=GuestLanguage.PYTHON,
        description="A minimal Python template returning a greeting.",
        files=(
            ExampleFile(
                path="main.py",
                content="""\
from {{template_name}} import exports


class Api(exports.Api):
    def hello(self) -> str:
        return "Hello from {{template-name}}!"
""",
            ),
            ExampleFile(
                path="build.sh",
                content="""\
#!/bin/sh
set -e
componentize-py --wit-path wit --world {{template-name}} bindings .
componentize-py --wit-path wit --world {{template-name}} componentize main -o {{template_name}}.wasm
""",
                executable=True,
            ),
            _HELLO_WIT,
            _GITIGNORE,
        ),
    ),
    Example(
        name="zig-hello",
        language=GuestLanguage.ZIG,
        description="A minimal Zig template returning a greeting.",
        files=(
            ExampleFile(
                path="build.zig",
                content="""\
const std = @import("std");

pub fn build(b: *std.Build) void {
    const lib = b.addSharedLibrary(.{
        .name = "{{template_name}}",
        .root_source_file = .{ .path = "src/main.zig" },
        .target = .{ .cpu_arch = .wasm32, .os_tag = .wasi },
        .optimize = .ReleaseSmall,
    });
    b.installArtifact(lib);
}
""",
            ),
            ExampleFile(
                path="src/main.zig",
                content="""\
const greeting = "Hello from {{template-name}}!";

export fn hello() [*:0]const u8 {
    return greeting;
}
""",
            ),
            _HELLO_WIT,
            _GITIGNORE,
        ),
    ),
)
