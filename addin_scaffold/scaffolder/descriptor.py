"""Typed model and rewrite logic for the Office add-in manifest descriptor.

``parse_descriptor`` turns manifest XML into a ``DescriptorDocument`` with
explicit accessors for the parts the scaffolder touches (``Id``,
``DisplayName``, ``FormSettings`` and the activation ``Rule``).
``rewrite_descriptor`` prunes form settings for unselected form kinds and
installs an activation rule built from the selected Outlook forms.

Everything the rewrite does not touch (namespace prefixes, comments, other
elements and attributes) survives a parse/rewrite/serialize round trip.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from io import BytesIO
from typing import Union

from lxml import etree

from .answers import parse_capabilities
from .errors import DescriptorParseError, ValidationError
from .filesystem import ProjectFileSystem
from .models import Capability, FormAxis, has_axis

XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"
OFFICE_APP_NS = "http://schemas.microsoft.com/office/appforoffice/1.1"

XSI_TYPE = f"{{{XSI_NS}}}type"

ITEM_READ = "ItemRead"
ITEM_EDIT = "ItemEdit"
ITEM_IS = "ItemIs"
RULE_COLLECTION = "RuleCollection"


# ---------------------------------------------------------------------------
# Rule model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ItemIsRule:
    """Activates the add-in for one item type in one form type."""
    item_type: str
    form_type: str


@dataclass(frozen=True)
class RuleCollection:
    """A set of rules combined with ``Mode`` (``Or`` / ``And``)."""
    mode: str
    rules: tuple["Rule", ...] = ()


@dataclass(frozen=True)
class OtherRule:
    """Any rule type the scaffolder does not interpret (kept verbatim)."""
    xsi_type: str
    attributes: dict[str, str] = field(default_factory=dict, hash=False, compare=False)


Rule = Union[ItemIsRule, RuleCollection, OtherRule]


def rule_for(capability: Capability) -> ItemIsRule:
    return ItemIsRule(item_type=capability.item_type, form_type=capability.form_type)


def rules_for(capabilities: tuple[Capability, ...] | list[Capability]) -> list[ItemIsRule]:
    """One ``ItemIs`` rule per selected capability, without duplicates."""
    rules: list[ItemIsRule] = []
    for capability in capabilities:
        rule = rule_for(capability)
        if rule not in rules:
            rules.append(rule)
    return rules


def combine_rules(rules: list[ItemIsRule]) -> Rule:
    """A single rule stays single; several are wrapped in an ``Or`` collection."""
    if len(rules) == 1:
        return rules[0]
    return RuleCollection(mode="Or", rules=tuple(rules))


# ---------------------------------------------------------------------------
# Document model
# ---------------------------------------------------------------------------

class FormSetting:
    """One ``<Form>`` entry of ``<FormSettings>``."""

    def __init__(self, element: etree._Element) -> None:
        self.element = element

    @property
    def form_type(self) -> str:
        """The ``xsi:type`` discriminator (``ItemRead`` / ``ItemEdit``)."""
        return self.element.get(XSI_TYPE, "")

    @property
    def source_location(self) -> str | None:
        for node in self.element.iter():
            if isinstance(node.tag, str) and etree.QName(node).localname == "SourceLocation":
                return node.get("DefaultValue")
        return None

    def __repr__(self) -> str:
        return f"FormSetting(form_type={self.form_type!r})"


class DescriptorDocument:
    """A parsed ``OfficeApp`` manifest.

    Attributes:
        tree: The underlying lxml element tree.
    """

    def __init__(self, tree: etree._ElementTree) -> None:
        self.tree = tree
        self.root = tree.getroot()
        self.namespace = etree.QName(self.root).namespace
        self._validate()

    # -- Structure ---------------------------------------------------------

    def _qname(self, local: str) -> str:
        return f"{{{self.namespace}}}{local}" if self.namespace else local

    def _child(self, local: str) -> etree._Element | None:
        return self.root.find(self._qname(local))

    def _validate(self) -> None:
        if etree.QName(self.root).localname != "OfficeApp":
            raise DescriptorParseError(
                f"Root element must be OfficeApp, got {etree.QName(self.root).localname}"
            )
        for required in ("Id", "FormSettings", "Rule"):
            if self._child(required) is None:
                raise DescriptorParseError(f"Missing <{required}> element")

    # -- Typed accessors ---------------------------------------------------

    @property
    def id(self) -> str:
        return (self._child("Id").text or "").strip()

    @property
    def display_name(self) -> str | None:
        node = self._child("DisplayName")
        return node.get("DefaultValue") if node is not None else None

    @property
    def form_settings_element(self) -> etree._Element:
        return self._child("FormSettings")

    @property
    def form_settings(self) -> list[FormSetting]:
        return [FormSetting(el) for el in self.form_settings_element.findall(self._qname("Form"))]

    @property
    def rule_element(self) -> etree._Element:
        return self._child("Rule")

    @property
    def rule(self) -> Rule:
        return self._parse_rule(self.rule_element)

    def _parse_rule(self, element: etree._Element) -> Rule:
        xsi_type = element.get(XSI_TYPE, "")
        if xsi_type == ITEM_IS:
            return ItemIsRule(item_type=element.get("ItemType", ""), form_type=element.get("FormType", ""))
        if xsi_type == RULE_COLLECTION:
            children = tuple(
                self._parse_rule(child) for child in element.findall(self._qname("Rule"))
            )
            return RuleCollection(mode=element.get("Mode", ""), rules=children)
        attributes = {k: v for k, v in element.attrib.items() if k != XSI_TYPE}
        return OtherRule(xsi_type=xsi_type, attributes=attributes)

    # -- Mutation ----------------------------------------------------------

    def remove_form_setting(self, setting: FormSetting) -> None:
        self.form_settings_element.remove(setting.element)

    def set_rule(self, rule: Rule) -> None:
        """Replace the activation rule in place, discarding the previous one."""
        old = self.rule_element
        index = self.root.index(old)
        self.root.remove(old)
        # built in place so the root's namespace prefixes are reused
        new = self._build_rule(rule, self.root)
        self.root.insert(index, new)
        new.tail = old.tail

    def _build_rule(self, rule: Rule, parent: etree._Element) -> etree._Element:
        element = etree.SubElement(parent, self._qname("Rule"))
        if isinstance(rule, ItemIsRule):
            element.set(XSI_TYPE, ITEM_IS)
            element.set("ItemType", rule.item_type)
            element.set("FormType", rule.form_type)
        elif isinstance(rule, RuleCollection):
            element.set(XSI_TYPE, RULE_COLLECTION)
            element.set("Mode", rule.mode)
            for child in rule.rules:
                self._build_rule(child, element)
        else:
            element.set(XSI_TYPE, rule.xsi_type)
            for key, value in rule.attributes.items():
                element.set(key, value)
        return element

    # -- Serialisation -----------------------------------------------------

    def to_bytes(self) -> bytes:
        """Serialise as UTF-8 XML with an XML declaration."""
        return etree.tostring(
            self.tree, xml_declaration=True, encoding="UTF-8", pretty_print=True
        )


def parse_descriptor(data: bytes, source: str = "") -> DescriptorDocument:
    """Parse manifest XML into a ``DescriptorDocument``.

    Raises:
        DescriptorParseError: If the XML is malformed or lacks the
            ``OfficeApp`` / ``Id`` / ``FormSettings`` / ``Rule`` structure.
    """
    parser = etree.XMLParser(
        remove_blank_text=True, resolve_entities=False, no_network=True
    )
    try:
        tree = etree.parse(BytesIO(data), parser)
    except etree.XMLSyntaxError as exc:
        raise DescriptorParseError(f"Malformed XML: {exc}", path=source) from exc
    try:
        return DescriptorDocument(tree)
    except DescriptorParseError as exc:
        if source and not exc.path:
            raise DescriptorParseError(str(exc), path=source) from None
        raise


# ---------------------------------------------------------------------------
# Rewrite
# ---------------------------------------------------------------------------

def rewrite_descriptor(
    document: DescriptorDocument, capabilities: tuple[Capability, ...] | list[Capability | str]
) -> DescriptorDocument:
    """Adapt *document* to the selected Outlook forms.

    1. Remove ``ItemRead`` form settings unless a read form is selected and
       ``ItemEdit`` form settings unless a compose form is selected; other
       form settings are left alone.
    2. Replace the activation rule: one ``ItemIs`` rule for a single
       selection, otherwise an ``Or`` ``RuleCollection`` with one rule per
       selected form.

    The document is modified in place and returned.

    Raises:
        ValidationError: If no Outlook form is selected.
        ConfigurationError: If a form value is unknown.
    """
    capabilities = parse_capabilities(list(capabilities))
    if not capabilities:
        raise ValidationError(
            "Must select at least one Outlook form type", field="outlook_form"
        )
    keep_read = has_axis(capabilities, FormAxis.READ)
    keep_edit = has_axis(capabilities, FormAxis.COMPOSE)

    for setting in document.form_settings:
        if setting.form_type == ITEM_READ and not keep_read:
            document.remove_form_setting(setting)
        elif setting.form_type == ITEM_EDIT and not keep_edit:
            document.remove_form_setting(setting)

    document.set_rule(combine_rules(rules_for(capabilities)))
    return document


def rewrite_descriptor_file(
    fs: ProjectFileSystem,
    path: str,
    capabilities: tuple[Capability, ...] | list[Capability | str],
) -> DescriptorDocument:
    """Read, rewrite and persist the descriptor at *path*.

    The file is only written once the rewritten document has been fully
    serialised, so a parse failure leaves the file untouched.

    Raises:
        DescriptorParseError: If the file is missing or malformed.
        ValidationError: If no Outlook form is selected.
    """
    data = fs.read(path)
    if data is None:
        raise DescriptorParseError("Descriptor file not found", path=path)
    document = rewrite_descriptor(parse_descriptor(data, source=path), capabilities)
    fs.write(path, document.to_bytes())
    return document
