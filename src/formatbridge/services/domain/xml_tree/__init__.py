"""
XML Tree Domain

Bidirectional conversion between Node trees and XML documents under the
four attribute encoding policies.
"""

from .converter import XmlParseError, build_xml, node_to_xml, parse_xml, render_xml, xml_to_node

__all__ = ["XmlParseError", "build_xml", "node_to_xml", "parse_xml", "render_xml", "xml_to_node"]
