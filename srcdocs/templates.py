"""Template rules that route fragments into rendered output files."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence, Set, Union

from jinja2 import Environment, Template, TemplateSyntaxError
from jinja2 import TemplateError as JinjaTemplateError

from .aggregator import stable_sort
from .errors import ConfigError, TemplateError
from .fragments import parse_order
from .logging import get_logger
from .models import FILE_TAG, Fragment, RenderedBlock

Rendered = Dict[str, List[RenderedBlock]]

_ENV = Environment(
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)


def compile_template(source: str, *, name: str) -> Template:
    """Compile a template string, reporting syntax errors as configuration errors."""
    if not isinstance(source, str):
        raise ConfigError(f"{name} must be a string")
    try:
        return _ENV.from_string(source)
    except TemplateSyntaxError as exc:
        raise TemplateError(f"in {name} (line {exc.lineno}): {exc.message}") from exc


def render_template(template: Template, context: Mapping[str, object], *, name: str) -> str:
    try:
        return template.render(context)
    except JinjaTemplateError as exc:
        raise TemplateError(f"while rendering {name}: {exc}") from exc
    except Exception as exc:
        # Expressions such as `{{ name + 1 }}` fail with plain Python errors.
        raise TemplateError(f"while rendering {name}: {type(exc).__name__}: {exc}") from exc


@dataclass(frozen=True)
class FixedOrder:
    """An order given as a literal number."""

    value: float

    def resolve(self, context: Mapping[str, object]) -> float:
        return self.value


@dataclass(frozen=True)
class TemplateOrder:
    """An order rendered from the fragment's variables and parsed as a float."""

    source: str
    template: Template = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "template", compile_template(self.source, name="order template"))

    def resolve(self, context: Mapping[str, object]) -> float:
        return parse_order(render_template(self.template, context, name="order template"))


OrderSpec = Union[FixedOrder, TemplateOrder]


def order_spec_from_value(value: object, *, rule: str) -> OrderSpec:
    """Build an order spec from a config value: numbers are fixed, strings are templates."""
    if value is None:
        return FixedOrder(0.0)
    if isinstance(value, bool):
        raise ConfigError(f"{rule}: `order` must be a number or a template string")
    if isinstance(value, (int, float)):
        return FixedOrder(float(value))
    if isinstance(value, str):
        return TemplateOrder(value)
    raise ConfigError(f"{rule}: `order` must be a number or a template string")


def _has_tags(fragment: Fragment, tags: Sequence[str]) -> bool:
    return all(tag in fragment.tags for tag in tags)


@dataclass
class EachTemplate:
    """Renders one block per fragment carrying every tag in ``tags``.

    ``file``, ``order`` and ``output`` are rendered with the fragment's tags
    plus ``__body__`` as variables.
    """

    tags: Sequence[str]
    file: str
    output: str
    order: OrderSpec = field(default_factory=lambda: FixedOrder(0.0))
    _file_template: Template = field(init=False, repr=False)
    _output_template: Template = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.tags = tuple(self.tags)
        self._file_template = compile_template(self.file, name="file template")
        self._output_template = compile_template(self.output, name="output template")

    def apply(self, fragments: Iterable[Fragment], result: Rendered) -> List[Fragment]:
        """Append rendered blocks to ``result`` and return the fragments that matched."""
        matched: List[Fragment] = []
        for fragment in fragments:
            if not _has_tags(fragment, self.tags):
                continue
            context = fragment.context()
            destination = render_template(self._file_template, context, name="file template")
            order = self.order.resolve(context)
            body = render_template(self._output_template, context, name="output template")
            result.setdefault(destination, []).append(RenderedBlock(order, body))
            matched.append(fragment)
        return matched


@dataclass
class AllTemplate:
    """Renders a single block from every fragment carrying the ``tags``.

    The template sees ``items``, a list of tag mappings (each with
    ``__body__``) in fragment order. ``file`` and ``order`` are literal.
    """

    tags: Sequence[str]
    file: str
    output: str
    order: float = 0.0
    _output_template: Template = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.tags = tuple(self.tags)
        self._output_template = compile_template(self.output, name="output template")

    def apply(self, fragments: Iterable[Fragment], result: Rendered) -> List[Fragment]:
        matched = [fragment for fragment in fragments if _has_tags(fragment, self.tags)]
        items = [fragment.context() for fragment in matched]
        body = render_template(self._output_template, {"items": items}, name="output template")
        result.setdefault(self.file, []).append(RenderedBlock(self.order, body))
        return matched


class TemplateEngine:
    """Applies template rules to the fragments collected from every source file."""

    def __init__(
        self,
        each_templates: Sequence[EachTemplate] = (),
        all_templates: Sequence[AllTemplate] = (),
    ) -> None:
        self.each_templates = tuple(each_templates)
        self.all_templates = tuple(all_templates)
        self.logger = get_logger("templates")

    def apply(self, fragments: Iterable[Fragment]) -> Rendered:
        """Render every rule, then route unclaimed ``@file`` fragments directly.

        Fragments are visited in ascending order, ties keeping scan order.
        A fragment rendered by a per-fragment rule is not routed again through
        its own ``@file`` tag.
        """
        ordered = stable_sort(fragments, key=lambda fragment: fragment.order)
        result: Rendered = {}
        claimed: Set[int] = set()

        for each_template in self.each_templates:
            matched = each_template.apply(ordered, result)
            claimed.update(id(fragment) for fragment in matched)
            self.logger.debug("Template for %s matched %d fragments", each_template.file, len(matched))

        for all_template in self.all_templates:
            matched = all_template.apply(ordered, result)
            self.logger.debug("Aggregate template for %s collected %d fragments", all_template.file, len(matched))

        for fragment in ordered:
            if id(fragment) in claimed:
                continue
            destination = fragment.tags.get(FILE_TAG)
            if destination is None:
                continue
            result.setdefault(destination, []).append(RenderedBlock(fragment.order, fragment.body))

        return result


__all__ = [
    "AllTemplate",
    "EachTemplate",
    "FixedOrder",
    "OrderSpec",
    "TemplateEngine",
    "TemplateOrder",
    "compile_template",
    "order_spec_from_value",
    "render_template",
]
