"""
Profile loader — Language profiles from YAML files

Lets users add languages, or their own keywords to built-in languages,
without touching code:

    profiles:
      racket:
        extensions: [.rkt]
        headings: {prefix: ";; ", token: "*", separator: " "}
        keywords:
          FUN: {key: f, pattern: '^\\s*\\(define\\s+\\('}
          VAR: {key: v, pattern: '^\\s*\\(define\\s+[^(]'}
          ALL: {key: a, pattern: {any: [{ref: FUN}, {ref: VAR}]}}
      emacs-lisp:
        keywords:
          use-package: {key: P, pattern: '^\\s*\\(use-package\\s'}

A language that is already registered keeps its profile and gains (or
overrides) the listed keywords; a new language gets a fresh profile.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .errors import ProfileConfigError
from .expressions import parse_expression
from .profile import HeadingStyle, LanguageProfile
from .registry import PatternRegistry

logger = logging.getLogger(__name__)


def load_profile_file(path: Union[str, Path], registry: PatternRegistry) -> List[str]:
    """
    Load a YAML profile file into a registry.

    Returns:
        Names of the languages the file touched

    Raises:
        ProfileConfigError: If the file can't be read or is malformed
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ProfileConfigError(f"{path}: cannot read profile file: {e}") from e
    except yaml.YAMLError as e:
        raise ProfileConfigError(f"{path}: invalid YAML: {e}") from e

    languages = apply_profiles(data, registry, origin=str(path))
    logger.debug("Loaded %d profile(s) from %s", len(languages), path)
    return languages


def apply_profiles(data: Any, registry: PatternRegistry, origin: str = "<profiles>") -> List[str]:
    """
    Apply an already-parsed profile document to a registry.

    Raises:
        ProfileConfigError: If the document is malformed
    """
    if not isinstance(data, dict):
        raise ProfileConfigError(f"{origin}: top level must be a mapping")
    profiles = data.get("profiles", {})
    if not isinstance(profiles, dict):
        raise ProfileConfigError(f"{origin}: 'profiles' must be a mapping of language -> profile")

    touched = []
    for language, body in profiles.items():
        where = f"{origin}: profiles.{language}"
        if body is None:
            body = {}
        if not isinstance(body, dict):
            raise ProfileConfigError(f"{where}: must be a mapping")
        try:
            _apply_profile(str(language), body, registry, where)
        except ProfileConfigError:
            raise
        except (TypeError, ValueError) as e:
            raise ProfileConfigError(f"{where}: {e}") from e
        touched.append(str(language))
    return touched


def _apply_profile(language: str, body: Dict[str, Any], registry: PatternRegistry, where: str) -> None:
    existing = registry.get_profile(language)

    headings = _parse_headings(body.get("headings"), where)
    extensions = body.get("extensions")
    if extensions is not None and not isinstance(extensions, list):
        raise ProfileConfigError(f"{where}.extensions: must be a list")

    if existing is None:
        profile = LanguageProfile(
            name=language,
            headings=headings or HeadingStyle(),
            extensions=set(str(e) for e in extensions or ()),
            description=str(body.get("description", "")),
        )
        registry.add_profile(profile)
    elif headings is not None or "description" in body or extensions:
        updated = existing.copy()
        if headings is not None:
            updated.headings = headings
        if "description" in body:
            updated.description = str(body["description"])
        if extensions:
            updated.extensions |= {str(e).lower() for e in extensions}
        registry.add_profile(updated)

    keywords = body.get("keywords", {}) or {}
    if not isinstance(keywords, dict):
        raise ProfileConfigError(f"{where}.keywords: must be a mapping")
    for keyword, spec in keywords.items():
        _apply_keyword(language, str(keyword), spec, registry, f"{where}.keywords.{keyword}")


def _apply_keyword(language: str, keyword: str, spec: Any, registry: PatternRegistry, where: str) -> None:
    if isinstance(spec, str):
        spec = {"pattern": spec}
    if not isinstance(spec, dict) or "pattern" not in spec:
        raise ProfileConfigError(f"{where}: needs a 'pattern'")

    key: Optional[str] = spec.get("key")
    try:
        pattern = parse_expression(spec["pattern"])
        registry.register(language, keyword, None if key is None else str(key), pattern)
    except (TypeError, ValueError) as e:
        raise ProfileConfigError(f"{where}: {e}") from e


def _parse_headings(data: Any, where: str) -> Optional[HeadingStyle]:
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ProfileConfigError(f"{where}.headings: must be a mapping")

    table = data.get("table")
    if table is not None:
        try:
            table = [(str(token), int(level)) for token, level in table]
        except (TypeError, ValueError) as e:
            raise ProfileConfigError(f"{where}.headings.table: expected [token, level] pairs") from e

    try:
        return HeadingStyle(
            prefix=str(data.get("prefix", "")),
            token=str(data.get("token", "*")),
            separator=str(data.get("separator", " ")),
            table=table,
        )
    except ValueError as e:
        raise ProfileConfigError(f"{where}.headings: {e}") from e
