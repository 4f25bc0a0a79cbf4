"""Routes prefixed with a language code."""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional
from urllib.parse import urlencode

from .configuration import get_settings
from .errors import InvalidConfigurationError
from .finder import split_option

ELEMENT_PATTERN = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)|\{([A-Za-z_][A-Za-z0-9_]*)\}")
DEFAULT_ELEMENT = r"[^/]+"
INFLECTED_ELEMENTS = ("controller", "action")


def dasherize(value: str) -> str:
    """``BlogPosts`` / ``viewAll`` / ``blog_posts`` -> ``blog-posts``."""

    value = re.sub(r"(?<=[a-z0-9])([A-Z])", r"-\1", value)
    return value.replace("_", "-").lower()


def camelize(value: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in re.split(r"[-_]", value) if part)


def camel_back(value: str) -> str:
    camel = camelize(value)
    return camel[:1].lower() + camel[1:]


def language_keys(languages: Iterable[str] | Mapping[str, Any]) -> List[str]:
    """Language keys from a list or a mapping keyed by language."""

    if isinstance(languages, Mapping):
        return [str(key) for key in languages]
    return [str(language) for language in languages]


def configured_languages() -> List[str]:
    """Language keys from the I18N_LANGUAGES setting."""

    configured = get_settings().I18N_LANGUAGES
    if not configured:
        return []
    if isinstance(configured, str):
        return split_option(configured)
    return language_keys(configured)


class I18nRoute:
    """A dashed route whose template starts with a ``:lang`` element."""

    def __init__(
        self,
        template: str,
        defaults: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
        *,
        languages: Iterable[str] | Mapping[str, Any] | None = None,
    ) -> None:
        if ":lang" not in template and "{lang}" not in template:
            template = "/:lang" + template
        if template == "/:lang/":
            template = "/:lang"

        options = dict(options or {})
        options["inflect"] = "dasherize"
        persist = list(options.get("persist", []))
        if "lang" not in persist:
            persist.append("lang")
        options["persist"] = persist
        if "lang" not in options:
            keys = configured_languages() if languages is None else language_keys(languages)
            if not keys:
                raise InvalidConfigurationError(
                    "No languages for the :lang element; set I18N_LANGUAGES or pass languages."
                )
            options["lang"] = "|".join(keys)

        self.template = template
        self.defaults: Dict[str, Any] = dict(defaults or {})
        self.options = options
        self.keys = [a or b for a, b in ELEMENT_PATTERN.findall(template)]
        self._regex: Optional[re.Pattern[str]] = None

    def element_pattern(self, name: str) -> str:
        pattern = self.options.get(name)
        if isinstance(pattern, str) and pattern:
            return pattern
        return DEFAULT_ELEMENT

    def compile(self) -> re.Pattern[str]:
        if self._regex is None:
            parts: List[str] = []
            cursor = 0
            for match in ELEMENT_PATTERN.finditer(self.template):
                parts.append(re.escape(self.template[cursor:match.start()]))
                name = match.group(1) or match.group(2)
                parts.append(f"(?P<{name}>{self.element_pattern(name)})")
                cursor = match.end()
            parts.append(re.escape(self.template[cursor:]))
            self._regex = re.compile("".join(parts))
        return self._regex

    def parse(self, path: str) -> Optional[Dict[str, Any]]:
        """Route parameters for a URL path, or None when it does not match."""

        path = path.split("?", 1)[0]
        if len(path) > 1:
            path = path.rstrip("/")
        match = self.compile().fullmatch(path)
        if not match:
            return None
        params = dict(self.defaults)
        params.update(match.groupdict())
        if "controller" in params and isinstance(params["controller"], str):
            params["controller"] = camelize(params["controller"])
        if "action" in params and isinstance(params["action"], str):
            params["action"] = camel_back(params["action"])
        return params

    def match(
        self,
        params: Mapping[str, Any],
        context: Optional[Mapping[str, Any]] = None,
    ) -> Optional[str]:
        """Build a URL from parameters, or None when the route cannot."""

        params = dict(params)
        for key in self.options["persist"]:
            if key not in params and context and key in context:
                params[key] = context[key]

        for key, value in self.defaults.items():
            if key not in self.keys and key in params and params[key] != value:
                return None

        values: Dict[str, str] = {}
        for key in self.keys:
            value = params.pop(key, self.defaults.get(key))
            if value is None:
                return None
            text = str(value)
            if key in INFLECTED_ELEMENTS:
                text = dasherize(text)
            if not re.fullmatch(self.element_pattern(key), text):
                return None
            values[key] = text

        url = ELEMENT_PATTERN.sub(lambda m: values[m.group(1) or m.group(2)], self.template)
        query = {
            key: value
            for key, value in params.items()
            if key not in self.defaults and value is not None
        }
        if query:
            url += "?" + urlencode(query)
        return url
