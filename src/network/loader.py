"""Model loading: path control, syntax control, translation and semantic control.

A model file is a JSON document validated against the bundled schema
(``schema/model.schema.json``).  Species are ordered by name before they are
given indices, so the index order (and therefore the CSV column order and the
enumeration order) does not depend on how the file lists them.
"""

from __future__ import annotations

import hashlib
import itertools
import json
import time
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

import jsonschema

from .errors import (
    ModelFileError,
    ModelValidationError,
    ValidationIssue,
    ValidationReport,
    make_error,
    make_warning,
)
from .species import Condition, Model, Rule, Species

_SCHEMA_PATH = Path(__file__).resolve().parent / "schema" / "model.schema.json"
_SUPPORTED_SUFFIXES = frozenset({".json"})


@dataclass(frozen=True)
class ValidationProfile:
    """Toggles that govern how validation findings are treated."""

    name: str
    warn_as_error: bool = False


_PROFILES: Dict[str, ValidationProfile] = {
    "dev": ValidationProfile(name="dev", warn_as_error=False),
    "strict": ValidationProfile(name="strict", warn_as_error=True),
}
PROFILE_NAMES = tuple(_PROFILES)


def get_profile(name: str | None) -> ValidationProfile:
    """Return the profile matching *name* (defaults to ``dev``)."""

    if not name:
        name = "dev"
    key = name.lower()
    if key not in _PROFILES:
        raise ValueError(f"Unknown validation profile: {name}")
    return _PROFILES[key]


@lru_cache(maxsize=1)
def _compiled_schema() -> jsonschema.Draft202012Validator:
    schema = json.loads(_SCHEMA_PATH.read_text("utf-8"))
    jsonschema.Draft202012Validator.check_schema(schema)
    return jsonschema.Draft202012Validator(schema)


def _json_path(parts: Any) -> str:
    components: List[str] = ["$"]
    for part in parts:
        if isinstance(part, int):
            components.append(f"[{part}]")
        else:
            components.append(f".{part}")
    return "".join(components)


def model_digest(document: Mapping[str, Any]) -> str:
    """Return the ``sha256-`` digest of the canonical JSON form of *document*."""

    canonical = json.dumps(document, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return f"sha256-{hashlib.sha256(canonical.encode('utf-8')).hexdigest()}"


# Path control and reading ---------------------------------------------


def check_path(path: str | Path) -> Path:
    """Ensure *path* names an existing model file with a supported suffix."""

    candidate = Path(path)
    if not candidate.exists():
        raise ModelFileError(str(path), "model file does not exist")
    if not candidate.is_file():
        raise ModelFileError(str(path), "model path is not a regular file")
    if candidate.suffix.lower() not in _SUPPORTED_SUFFIXES:
        raise ModelFileError(str(path), f"unsupported model suffix {candidate.suffix!r}, expected .json")
    return candidate


def read_model(path: Path) -> Dict[str, Any]:
    """Read and decode the JSON model document stored at *path*."""

    try:
        text = path.read_text("utf-8")
    except OSError as exc:
        raise ModelFileError(str(path), f"cannot read model file: {exc}") from exc
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ModelFileError(str(path), f"invalid JSON at line {exc.lineno}: {exc.msg}") from exc
    return document


# Syntax control --------------------------------------------------------


def control_syntax(document: Any) -> List[ValidationIssue]:
    """Validate *document* against the model schema."""

    validator = _compiled_schema()
    issues: List[ValidationIssue] = []
    for error in sorted(validator.iter_errors(document), key=lambda err: list(err.absolute_path)):
        issues.append(make_error("syntax.schema", error.message, _json_path(error.absolute_path)))
    return issues


# Translation and semantic control -------------------------------------


def _sorted_entries(document: Mapping[str, Any]) -> List[Tuple[int, Mapping[str, Any]]]:
    entries = list(enumerate(document["species"]))
    entries.sort(key=lambda item: item[1]["name"])
    return entries


def control_semantics(document: Mapping[str, Any]) -> List[ValidationIssue]:
    """Check totality and range invariants of a schema-valid document."""

    issues: List[ValidationIssue] = []
    maxima: Dict[str, int] = {}
    for position, entry in enumerate(document["species"]):
        name = entry["name"]
        if name in maxima:
            issues.append(
                make_error("species.duplicate_name", f"species {name!r} is declared twice", f"$.species[{position}].name")
            )
            continue
        maxima[name] = int(entry["max"])

    for position, entry in enumerate(document["species"]):
        base = f"$.species[{position}]"
        name = entry["name"]
        own_max = int(entry["max"])
        regulators = list(entry.get("regulators", []))

        unknown = [regulator for regulator in regulators if regulator not in maxima]
        for regulator in unknown:
            issues.append(
                make_error("rule.unknown_regulator", f"{name} is regulated by unknown species {regulator!r}", f"{base}.regulators")
            )
        if len(set(regulators)) != len(regulators):
            issues.append(
                make_error("rule.duplicate_regulator", f"{name} lists a regulator more than once", f"{base}.regulators")
            )
        if unknown or len(set(regulators)) != len(regulators):
            continue

        domains = [range(maxima[regulator] + 1) for regulator in regulators]
        seen: set[Condition] = set()
        for rule_position, rule in enumerate(entry["rules"]):
            rule_path = f"{base}.rules[{rule_position}]"
            condition = tuple(int(value) for value in rule["when"])
            target = int(rule["target"])
            if len(condition) != len(regulators):
                issues.append(
                    make_error(
                        "rule.arity_mismatch",
                        f"{name} has {len(regulators)} regulators but the condition lists {len(condition)} values",
                        f"{rule_path}.when",
                    )
                )
                continue
            for regulator, value in zip(regulators, condition):
                if value > maxima[regulator]:
                    issues.append(
                        make_error(
                            "rule.value_out_of_range",
                            f"{regulator} never reaches {value} (max {maxima[regulator]})",
                            f"{rule_path}.when",
                        )
                    )
            if condition in seen:
                issues.append(
                    make_error("rule.duplicate_condition", f"{name} defines {list(condition)} twice", f"{rule_path}.when")
                )
            seen.add(condition)
            if target > own_max:
                issues.append(
                    make_error(
                        "rule.target_out_of_range",
                        f"{name} target {target} exceeds its max {own_max}",
                        f"{rule_path}.target",
                    )
                )

        total = 1
        for domain in domains:
            total *= len(domain)
        covered = sum(1 for condition in seen if all(value in domain for value, domain in zip(condition, domains)))
        default = entry.get("default")
        if default is None:
            if covered < total:
                issues.append(
                    make_error(
                        "rule.incomplete",
                        f"{name} defines {covered} of {total} regulator combinations and has no default",
                        f"{base}.rules",
                    )
                )
        else:
            if int(default) > own_max:
                issues.append(
                    make_error(
                        "rule.target_out_of_range",
                        f"{name} default {default} exceeds its max {own_max}",
                        f"{base}.default",
                    )
                )
            if covered >= total:
                issues.append(
                    make_warning("rule.unused_default", f"{name} lists every combination; default is never used", f"{base}.default")
                )
    return issues


def obtain_species(document: Mapping[str, Any]) -> Tuple[Tuple[Species, ...], Tuple[Rule, ...]]:
    """Translate a semantically valid document into species and rule tables."""

    entries = _sorted_entries(document)
    index = {entry["name"]: position for position, (_, entry) in enumerate(entries)}
    species = tuple(
        Species(index=position, name=entry["name"], max_value=int(entry["max"]))
        for position, (_, entry) in enumerate(entries)
    )

    rules: List[Rule] = []
    for position, (_, entry) in enumerate(entries):
        regulators = tuple(index[name] for name in entry.get("regulators", []))
        listed = {tuple(int(value) for value in rule["when"]): int(rule["target"]) for rule in entry["rules"]}
        default = entry.get("default")
        table: Dict[Condition, int] = {}
        for condition in itertools.product(*(species[regulator].domain for regulator in regulators)):
            if condition in listed:
                table[condition] = listed[condition]
            else:
                table[condition] = int(default)
        rules.append(Rule(target=position, regulators=regulators, table=table))
    return species, tuple(rules)


def validate(document: Any) -> ValidationReport:
    """Run syntax control and, when it passes, semantic control."""

    timings = {"syntax": 0, "semantics": 0}
    start = time.perf_counter()
    issues = control_syntax(document)
    timings["syntax"] = int((time.perf_counter() - start) * 1000)
    if issues:
        return ValidationReport.from_issues(issues, timings)

    start = time.perf_counter()
    issues.extend(control_semantics(document))
    timings["semantics"] = int((time.perf_counter() - start) * 1000)
    return ValidationReport.from_issues(issues, timings)


def parse_model(
    document: Any,
    *,
    name: str | None = None,
    profile: str | ValidationProfile | None = None,
) -> Model:
    """Validate *document* and turn it into an immutable :class:`Model`."""

    profile_cfg = profile if isinstance(profile, ValidationProfile) else get_profile(profile)
    report = validate(document)
    issues = report.blocking(profile_cfg.warn_as_error)
    if issues:
        raise ModelValidationError(report, issues)

    species, rules = obtain_species(document)
    model_name = name or document.get("name") or "model"
    return Model(name=model_name, species=species, rules=rules, digest=model_digest(document))


def obtain_model(path: str | Path, *, profile: str | ValidationProfile | None = None) -> Model:
    """Turn the model file at *path* into a :class:`Model`.

    The model is named after the ``name`` field of the document, or the file
    stem when the field is absent.
    """

    model_path = check_path(path)
    document = read_model(model_path)
    name = document.get("name") if isinstance(document, dict) else None
    return parse_model(document, name=name or model_path.stem, profile=profile)


__all__ = [
    "PROFILE_NAMES",
    "ValidationProfile",
    "control_semantics",
    "control_syntax",
    "get_profile",
    "model_digest",
    "obtain_model",
    "obtain_species",
    "parse_model",
    "read_model",
    "check_path",
    "validate",
]
