from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Union
from xml.etree import ElementTree as ET

from .errors import EctdErrorCode, create_filesystem_error
from .xml_tree import XmlNode

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
DEFAULT_INDENT = "\t"

# Characters outside the XML 1.0 Char production
XML_ILLEGAL_CHARS = re.compile("[^\t\n\r\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def xml_safe(text: str) -> str:
    return XML_ILLEGAL_CHARS.sub("", text)


def to_element(root: XmlNode) -> ET.Element:
    """
    Convert a node tree to ElementTree elements.

    Attribute names are written verbatim, so prefixed names such as
    ``xsi:type`` or ``xmlns:xsi`` pass through unchanged. Characters XML 1.0
    cannot represent are dropped from values.
    """
    element = ET.Element(root.tag, {name: xml_safe(value) for name, value in root.attributes.items()})
    if root.text is not None:
        element.text = xml_safe(root.text)
    for child in root.children:
        element.append(to_element(child))
    return element


def render_xml(root: XmlNode, indent: str = DEFAULT_INDENT) -> str:
    """Render with an XML declaration, one element per line, empty elements self-closed."""
    element = to_element(root)
    if indent:
        ET.indent(element, space=indent)
    body = ET.tostring(element, encoding="unicode", short_empty_elements=True)
    return f"{XML_DECLARATION}\n{body}\n"


def write_xml(root: XmlNode, path: Union[str, Path], indent: str = DEFAULT_INDENT) -> Path:
    target = Path(path)
    content = render_xml(root, indent)
    try:
        target.write_text(content, encoding="utf-8", newline="")
    except OSError as exc:
        raise create_filesystem_error(EctdErrorCode.FS_WRITE_FAILED, "write manifest", str(target), exc) from exc
    logger.debug("Manifest written", extra={"path": str(target), "bytes": len(content.encode("utf-8"))})
    return target
