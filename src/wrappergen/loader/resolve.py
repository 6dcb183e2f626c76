from __future__ import annotations

import json
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from ..config import go_binary
from ..errors import ModuleLoadError
from ..log import get_logger
from ..model import Module
from .decode import decode_module

log = get_logger("loader")


class ModuleResolver(Protocol):
    def resolve(self, module_path: str) -> Module:
        """Load and type-check `module_path`, raising ModuleLoadError on any failure."""


@dataclass(frozen=True)
class GoResolver:
    """Resolve Go packages with the local Go toolchain.

    A small stdlib-only helper program is compiled with `go run` in a temporary
    directory; it lists the package with `go list -export -deps`, type-checks it
    against the dependencies' export data and prints the declarations as JSON.
    """

    work_dir: Path | None = None
    go: str | None = None
    env: dict[str, str] | None = None

    def resolve(self, module_path: str) -> Module:
        work_dir = Path(self.work_dir or Path.cwd()).resolve()
        obj = _run_helper(
            module_path=module_path,
            work_dir=work_dir,
            go=self.go or go_binary(),
            env=self.env,
        )
        module = decode_module(obj, module_path=module_path)
        log.debug("resolved %s as package %s (%d files)", module_path, module.path, len(module.syntax))
        return module


def _run_helper(*, module_path: str, work_dir: Path, go: str, env: dict[str, str] | None) -> object:
    with tempfile.TemporaryDirectory(prefix="wrappergen-loader-") as td:
        helper_dir = Path(td)
        (helper_dir / "go.mod").write_text(
            "\n".join(
                [
                    "module wrappergen.loader",
                    "",
                    "go 1.22",
                    "",
                ]
            ),
            encoding="utf-8",
        )
        (helper_dir / "main.go").write_text(_loader_go_source(), encoding="utf-8")

        cmd = [go, "run", ".", "--dir", str(work_dir), "--go", go, "--pattern", module_path]
        try:
            proc = subprocess.run(
                cmd,
                cwd=str(helper_dir),
                env=env,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise ModuleLoadError(
                module_path,
                [f"command not found: {go}"],
                hint="Go toolchain not found. Install Go and make sure `go` is on PATH, "
                "or point WRAPPERGEN_GO at the binary.",
            ) from e

        if proc.returncode != 0:
            out = "\n".join(s for s in [proc.stdout.strip("\n"), proc.stderr.strip("\n")] if s)
            raise ModuleLoadError(module_path, [f"loader failed: {out}"])

        try:
            return json.loads(proc.stdout)
        except ValueError as e:
            raise ModuleLoadError(module_path, [f"failed to parse loader output: {e}"]) from e


def _loader_go_source() -> str:
    # Keep this file stdlib-only so `go run` doesn't need network access.
    return r'''
package main

import (
	"bytes"
	"encoding/json"
	"errors"
	"flag"
	"fmt"
	"go/ast"
	"go/importer"
	"go/parser"
	"go/token"
	"go/types"
	"io"
	"os"
	"os/exec"
	"path/filepath"
)

type listError struct {
	Err string
}

type listPkg struct {
	ImportPath string
	Name       string
	Dir        string
	GoFiles    []string
	CgoFiles   []string
	Export     string
	DepOnly    bool
	ImportMap  map[string]string
	Error      *listError
	DepsErrors []*listError
}

type outPkg struct {
	Path string `json:"path"`
	Name string `json:"name"`
}

type outVar struct {
	Name string   `json:"name"`
	Type *outType `json:"type"`
}

type outField struct {
	Name     string   `json:"name"`
	Type     *outType `json:"type"`
	Embedded bool     `json:"embedded,omitempty"`
	Tag      string   `json:"tag,omitempty"`
}

type outTerm struct {
	Tilde bool     `json:"tilde,omitempty"`
	Type  *outType `json:"type"`
}

type outType struct {
	Kind      string     `json:"kind"`
	Name      string     `json:"name,omitempty"`
	Pkg       *outPkg    `json:"pkg,omitempty"`
	Args      []*outType `json:"args,omitempty"`
	Elem      *outType   `json:"elem,omitempty"`
	Key       *outType   `json:"key,omitempty"`
	Len       int64      `json:"len,omitempty"`
	Dir       string     `json:"dir,omitempty"`
	Params    []outVar   `json:"params,omitempty"`
	Results   []outVar   `json:"results,omitempty"`
	Variadic  bool       `json:"variadic,omitempty"`
	Methods   []outVar   `json:"methods,omitempty"`
	Explicit  []outVar   `json:"explicit,omitempty"`
	Embeddeds []*outType `json:"embeddeds,omitempty"`
	Fields    []outField `json:"fields,omitempty"`
	Terms     []outTerm  `json:"terms,omitempty"`
}

type outSpec struct {
	Name  string `json:"name"`
	Ident string `json:"ident"`
}

type outFile struct {
	Filename  string    `json:"filename"`
	TypeSpecs []outSpec `json:"type_specs"`
}

type outDef struct {
	Name       string   `json:"name"`
	Type       *outType `json:"type"`
	Underlying *outType `json:"underlying"`
}

type outObj struct {
	Found  bool              `json:"found"`
	Name   string            `json:"name"`
	Path   string            `json:"path"`
	Errors []string          `json:"errors"`
	Files  []outFile         `json:"files"`
	Defs   map[string]outDef `json:"defs"`
}

var goBin = "go"

func main() {
	var dir, pattern string
	flag.StringVar(&dir, "dir", "", "working directory to resolve the pattern in")
	flag.StringVar(&goBin, "go", "go", "go toolchain binary")
	flag.StringVar(&pattern, "pattern", ".", "package pattern to load")
	flag.Parse()

	if dir != "" {
		if err := os.Chdir(dir); err != nil {
			fmt.Fprintf(os.Stderr, "chdir: %v\n", err)
			os.Exit(2)
		}
	}

	out, err := load(pattern)
	if err != nil {
		fmt.Fprintln(os.Stderr, err.Error())
		os.Exit(1)
	}

	enc := json.NewEncoder(os.Stdout)
	enc.SetEscapeHTML(false)
	_ = enc.Encode(out)
}

func goList(pattern string) ([]*listPkg, error) {
	cmd := exec.Command(goBin, "list", "-e", "-export", "-deps", "-json", "--", pattern)
	var stdout, stderr bytes.Buffer
	cmd.Stdout = &stdout
	cmd.Stderr = &stderr
	if err := cmd.Run(); err != nil {
		return nil, fmt.Errorf("go list failed: %v\n%s", err, stderr.String())
	}

	dec := json.NewDecoder(&stdout)
	pkgs := []*listPkg{}
	for {
		p := &listPkg{}
		if err := dec.Decode(p); err != nil {
			if errors.Is(err, io.EOF) {
				break
			}
			return nil, fmt.Errorf("failed to decode go list json: %v", err)
		}
		pkgs = append(pkgs, p)
	}
	return pkgs, nil
}

func load(pattern string) (*outObj, error) {
	pkgs, err := goList(pattern)
	if err != nil {
		return nil, err
	}

	out := &outObj{Errors: []string{}, Files: []outFile{}, Defs: map[string]outDef{}}
	byPath := map[string]*listPkg{}
	var target *listPkg
	for _, p := range pkgs {
		byPath[p.ImportPath] = p
		// -deps lists dependencies first; the first non-dependency is the requested package.
		if target == nil && !p.DepOnly {
			target = p
		}
	}
	if target == nil {
		return out, nil
	}
	out.Found = true
	out.Name = target.Name
	out.Path = target.ImportPath

	if target.Error != nil {
		out.Errors = append(out.Errors, target.Error.Err)
	}
	for _, e := range target.DepsErrors {
		out.Errors = append(out.Errors, e.Err)
	}
	if len(out.Errors) > 0 {
		return out, nil
	}

	fset := token.NewFileSet()
	// Files importing "C" are listed separately; FakeImportC lets go/types accept them.
	srcFiles := append(append([]string{}, target.GoFiles...), target.CgoFiles...)
	files := make([]*ast.File, 0, len(srcFiles))
	for _, fn := range srcFiles {
		af, err := parser.ParseFile(fset, filepath.Join(target.Dir, fn), nil, parser.SkipObjectResolution)
		if err != nil {
			out.Errors = append(out.Errors, err.Error())
			continue
		}
		files = append(files, af)
	}
	if len(out.Errors) > 0 {
		return out, nil
	}

	imp := importer.ForCompiler(fset, "gc", func(path string) (io.ReadCloser, error) {
		if mapped, ok := target.ImportMap[path]; ok {
			path = mapped
		}
		p := byPath[path]
		if p == nil || p.Export == "" {
			return nil, fmt.Errorf("no export data for %s", path)
		}
		return os.Open(p.Export)
	})
	info := &types.Info{Defs: map[*ast.Ident]types.Object{}}
	conf := types.Config{
		Importer:    imp,
		FakeImportC: true,
		Error: func(err error) {
			out.Errors = append(out.Errors, err.Error())
		},
	}
	pkg, _ := conf.Check(target.ImportPath, fset, files, info)
	if len(out.Errors) > 0 {
		return out, nil
	}
	out.Name = pkg.Name()

	for _, af := range files {
		of := outFile{Filename: fset.Position(af.Pos()).Filename, TypeSpecs: []outSpec{}}
		for _, decl := range af.Decls {
			gd, ok := decl.(*ast.GenDecl)
			if !ok || gd.Tok != token.TYPE {
				continue
			}
			for _, spec := range gd.Specs {
				ts, ok := spec.(*ast.TypeSpec)
				if !ok || ts.Name == nil {
					continue
				}
				ident := fset.Position(ts.Name.Pos()).String()
				of.TypeSpecs = append(of.TypeSpecs, outSpec{Name: ts.Name.Name, Ident: ident})
				obj := info.Defs[ts.Name]
				if obj == nil {
					continue
				}
				out.Defs[ident] = outDef{
					Name:       obj.Name(),
					Type:       encodeType(obj.Type()),
					Underlying: encodeType(obj.Type().Underlying()),
				}
			}
		}
		out.Files = append(out.Files, of)
	}
	return out, nil
}

var anyType = types.Universe.Lookup("any").Type()

func encodePkg(p *types.Package) *outPkg {
	if p == nil {
		return nil
	}
	return &outPkg{Path: p.Path(), Name: p.Name()}
}

func encodeList(l *types.TypeList) []*outType {
	out := []*outType{}
	for i := 0; i < l.Len(); i++ {
		out = append(out, encodeType(l.At(i)))
	}
	return out
}

func encodeTuple(t *types.Tuple) []outVar {
	out := []outVar{}
	for i := 0; i < t.Len(); i++ {
		v := t.At(i)
		out = append(out, outVar{Name: v.Name(), Type: encodeType(v.Type())})
	}
	return out
}

func encodeFunc(f *types.Func) outVar {
	return outVar{Name: f.Name(), Type: encodeType(f.Type())}
}

// Named and alias types are encoded as references only, which keeps recursive types finite.
func encodeType(t types.Type) *outType {
	if t == anyType {
		return &outType{Kind: "named", Name: "any"}
	}
	switch t := t.(type) {
	case *types.Basic:
		if t.Kind() == types.UnsafePointer {
			return &outType{Kind: "named", Name: "Pointer", Pkg: &outPkg{Path: "unsafe", Name: "unsafe"}}
		}
		return &outType{Kind: "basic", Name: t.Name()}
	case *types.Named:
		return &outType{Kind: "named", Name: t.Obj().Name(), Pkg: encodePkg(t.Obj().Pkg()), Args: encodeList(t.TypeArgs())}
	// Only reached with gotypesalias=1; the helper module's go 1.22 directive keeps it off,
	// so aliases normally resolve to their target. Alias type arguments (Go 1.24) are not encoded.
	case *types.Alias:
		return &outType{Kind: "alias", Name: t.Obj().Name(), Pkg: encodePkg(t.Obj().Pkg())}
	case *types.TypeParam:
		return &outType{Kind: "typeparam", Name: t.Obj().Name()}
	case *types.Pointer:
		return &outType{Kind: "pointer", Elem: encodeType(t.Elem())}
	case *types.Slice:
		return &outType{Kind: "slice", Elem: encodeType(t.Elem())}
	case *types.Array:
		return &outType{Kind: "array", Len: t.Len(), Elem: encodeType(t.Elem())}
	case *types.Map:
		return &outType{Kind: "map", Key: encodeType(t.Key()), Elem: encodeType(t.Elem())}
	case *types.Chan:
		dir := "both"
		switch t.Dir() {
		case types.SendOnly:
			dir = "send"
		case types.RecvOnly:
			dir = "recv"
		}
		return &outType{Kind: "chan", Dir: dir, Elem: encodeType(t.Elem())}
	case *types.Signature:
		return &outType{
			Kind:     "signature",
			Params:   encodeTuple(t.Params()),
			Results:  encodeTuple(t.Results()),
			Variadic: t.Variadic(),
		}
	case *types.Interface:
		o := &outType{Kind: "interface"}
		for i := 0; i < t.NumMethods(); i++ {
			o.Methods = append(o.Methods, encodeFunc(t.Method(i)))
		}
		for i := 0; i < t.NumExplicitMethods(); i++ {
			o.Explicit = append(o.Explicit, encodeFunc(t.ExplicitMethod(i)))
		}
		for i := 0; i < t.NumEmbeddeds(); i++ {
			o.Embeddeds = append(o.Embeddeds, encodeType(t.EmbeddedType(i)))
		}
		return o
	case *types.Struct:
		o := &outType{Kind: "struct"}
		for i := 0; i < t.NumFields(); i++ {
			f := t.Field(i)
			o.Fields = append(o.Fields, outField{Name: f.Name(), Type: encodeType(f.Type()), Embedded: f.Embedded(), Tag: t.Tag(i)})
		}
		return o
	case *types.Union:
		o := &outType{Kind: "union"}
		for i := 0; i < t.Len(); i++ {
			term := t.Term(i)
			o.Terms = append(o.Terms, outTerm{Tilde: term.Tilde(), Type: encodeType(term.Type())})
		}
		return o
	}
	return &outType{Kind: "invalid", Name: t.String()}
}
'''
