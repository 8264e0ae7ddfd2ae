"""GraphQL document compiler — .graphql source to an importable CommonJS module.

The generated module exports the parsed document as a graphql-js style
``DocumentNode`` (``kind`` / camelCase keys, nested locations stripped). It
also exports each named operation and fragment narrowed to the definitions it
references, and it expands ``#import "./other.graphql"`` header lines into
``require`` calls.

The original source text is embedded verbatim as ``doc.loc.source.body``.
Change detection in ``gqlforge.core.fingerprint`` depends on that literal, so
it is produced with the same ``serialize_source`` helper.
"""

from __future__ import annotations

import json
import re
from enum import Enum
from typing import Any

from graphql import GraphQLError, parse
from graphql.language.ast import Node

from gqlforge.core.fingerprint import serialize_source

DEFINITION_KINDS = ("OperationDefinition", "FragmentDefinition")

TYPESCRIPT_DECLARATION = "\n".join([
    "import { DocumentNode } from 'graphql';",
    "declare const doc: DocumentNode;",
    "export default doc;",
    "",
])

_LINE_BREAK = re.compile(r"\r\n|\r|\n")

_UNIQUE_FRAGMENTS_JS = """
var names = {};
function unique(defs) {
  return defs.filter(function (def) {
    if (def.kind !== "FragmentDefinition") return true;
    var name = def.name.value;
    if (names[name]) {
      return false;
    }
    names[name] = true;
    return true;
  });
}
"""

_ONE_QUERY_JS = """
function collectFragmentReferences(node, refs) {
  if (node.kind === "FragmentSpread") {
    refs.add(node.name.value);
  } else if (node.kind === "VariableDefinition") {
    var type = node.type;
    if (type.kind === "NamedType") {
      refs.add(type.name.value);
    }
  }
  if (node.selectionSet) {
    node.selectionSet.selections.forEach(function (selection) {
      collectFragmentReferences(selection, refs);
    });
  }
  if (node.variableDefinitions) {
    node.variableDefinitions.forEach(function (def) {
      collectFragmentReferences(def, refs);
    });
  }
  if (node.definitions) {
    node.definitions.forEach(function (def) {
      collectFragmentReferences(def, refs);
    });
  }
}

var definitionRefs = {};
(function extractReferences() {
  doc.definitions.forEach(function (def) {
    if (def.name) {
      var refs = new Set();
      collectFragmentReferences(def, refs);
      definitionRefs[def.name.value] = refs;
    }
  });
})();

function findOperation(doc, name) {
  for (var i = 0; i < doc.definitions.length; i++) {
    var element = doc.definitions[i];
    if (element.name && element.name.value == name) {
      return element;
    }
  }
}

function oneQuery(doc, operationName) {
  var newDoc = {
    kind: doc.kind,
    definitions: [findOperation(doc, operationName)]
  };
  if (doc.hasOwnProperty("loc")) {
    newDoc.loc = doc.loc;
  }

  var opRefs = definitionRefs[operationName] || new Set();
  var allRefs = new Set();
  var newRefs = new Set();
  opRefs.forEach(function (refName) {
    newRefs.add(refName);
  });

  while (newRefs.size > 0) {
    var prevRefs = newRefs;
    newRefs = new Set();
    prevRefs.forEach(function (refName) {
      if (!allRefs.has(refName)) {
        allRefs.add(refName);
        var childRefs = definitionRefs[refName] || new Set();
        childRefs.forEach(function (childRef) {
          newRefs.add(childRef);
        });
      }
    });
  }

  allRefs.forEach(function (refName) {
    var op = findOperation(doc, refName);
    if (op) {
      newDoc.definitions.push(op);
    }
  });
  return newDoc;
}
"""


class TransformError(ValueError):
    """Raised when a source document cannot be compiled."""


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.capitalize() for part in rest)


def ast_to_js(value: Any) -> Any:
    """Convert a graphql-core AST into graphql-js shaped plain data.

    Locations and unset attributes are dropped.
    """
    if isinstance(value, Node):
        result: dict[str, Any] = {"kind": type(value).__name__.removesuffix("Node")}
        for key in value.keys:
            if key == "loc":
                continue
            item = getattr(value, key, None)
            if item is None:
                continue
            result[_camel(key)] = ast_to_js(item)
        return result
    if isinstance(value, (list, tuple)):
        return [ast_to_js(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    return value


def import_statements(source: str) -> list[str]:
    """Return the ``require`` targets of the leading ``#import`` lines.

    Only the header comment block is scanned; the first non-comment,
    non-empty line ends it.
    """
    targets: list[str] = []
    for line in _LINE_BREAK.split(source):
        if line.startswith("#"):
            words = line[1:].split(" ")
            if words[0] == "import":
                if len(words) < 2 or not words[1]:
                    raise TransformError(f"Malformed import line: {line!r}")
                targets.append(words[1])
        elif line:
            break
    return targets


def compile_document(source: str) -> str:
    """Compile GraphQL source text into a CommonJS module.

    Raises ``TransformError`` on syntax errors and on unnamed definitions in
    a document that has more than one.
    """
    try:
        document = parse(source)
    except GraphQLError as exc:
        raise TransformError(str(exc)) from exc

    doc = ast_to_js(document)
    # graphql-js offsets count UTF-16 code units
    doc["loc"] = {"start": 0, "end": len(source.encode("utf-16-le")) // 2}

    lines = [
        f"var doc = {json.dumps(doc, ensure_ascii=False, separators=(',', ':'))};",
        "doc.loc.source = {"
        f'"body":{serialize_source(source)},'
        '"name":"GraphQL request",'
        '"locationOffset":{"line":1,"column":1}};',
        _UNIQUE_FRAGMENTS_JS,
    ]
    for target in import_statements(source):
        lines.append(
            f"doc.definitions = doc.definitions.concat(unique(require({target}).definitions));"
        )

    definitions = [d for d in doc["definitions"] if d["kind"] in DEFINITION_KINDS]
    if not definitions:
        lines.append("module.exports = doc;")
        return "\n".join(lines) + "\n"

    lines.append(_ONE_QUERY_JS)
    lines.append("module.exports = doc;")
    for definition in definitions:
        if "name" not in definition:
            if len(definitions) > 1:
                raise TransformError(
                    "Query/mutation names are required for a document with multiple definitions"
                )
            continue
        name = json.dumps(definition["name"]["value"])
        lines.append(f"module.exports[{name}] = oneQuery(doc, {name});")
    return "\n".join(lines) + "\n"
