"""RSS and Atom feed parsing."""

import re
from typing import Optional
from xml.etree import ElementTree as ET

from feed_aggregator.core import FeedParser, ParseError, RawEntry

ATOM_NS = "http://www.w3.org/2005/Atom"
RSS1_NS = "http://purl.org/rss/1.0/"
DC_NS = "http://purl.org/dc/elements/1.1/"
CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"

_XML_DECLARATION_RE = re.compile(r"^\s*<\?xml[^>]*\?>")

# (namespace, local name) -> raw entry key
RSS_FIELDS = {
    ("", "title"): "title",
    ("", "link"): "link",
    ("", "guid"): "guid",
    ("", "description"): "content",
    ("", "pubDate"): "pubDate",
    (RSS1_NS, "title"): "title",
    (RSS1_NS, "link"): "link",
    (RSS1_NS, "description"): "content",
    (DC_NS, "date"): "date",
    (CONTENT_NS, "encoded"): "content:encoded",
}

ATOM_FIELDS = {
    (ATOM_NS, "title"): "title",
    (ATOM_NS, "id"): "id",
    (ATOM_NS, "published"): "published",
    (ATOM_NS, "updated"): "updated",
    (ATOM_NS, "summary"): "summary",
    (ATOM_NS, "content"): "content",
    (DC_NS, "date"): "date",
}


def _split_tag(tag: str) -> tuple[str, str]:
    if tag.startswith("{"):
        namespace, _, local = tag[1:].partition("}")
        return namespace, local
    return "", tag


def _text(element: ET.Element) -> str:
    return "".join(element.itertext()).strip()


def _add_snippet(entry: RawEntry) -> None:
    # Snippet of the main content; ranks above an Atom summary
    if entry.get("content"):
        entry["contentSnippet"] = entry["content"]


class XmlFeedParser(FeedParser):
    """Parse RSS 2.0, RSS 1.0 (RDF) and Atom documents."""
    
    def parse(self, body: str) -> list[RawEntry]:
        if not body or not body.strip():
            raise ParseError("Empty feed body")
        
        # Text is already decoded; a stale encoding declaration would confuse expat
        xml_text = _XML_DECLARATION_RE.sub("", body.lstrip("\ufeff"), count=1)
        
        try:
            root = ET.fromstring(xml_text)
        except ET.ParseError as e:
            raise ParseError(f"Invalid XML: {e}") from e
        
        _, root_name = _split_tag(root.tag)
        
        if root_name in ("rss", "RDF"):
            return [
                self._parse_rss_item(element)
                for element in root.iter()
                if _split_tag(element.tag) in (("", "item"), (RSS1_NS, "item"))
            ]
        
        if root_name == "feed":
            return [self._parse_atom_entry(element) for element in root.iter(f"{{{ATOM_NS}}}entry")]
        
        raise ParseError(f"Not an RSS or Atom feed (root element <{root_name}>)")
    
    def _parse_rss_item(self, item: ET.Element) -> RawEntry:
        entry: RawEntry = {}
        links: list[dict[str, str]] = []
        
        for child in item:
            key = RSS_FIELDS.get(_split_tag(child.tag))
            if key is not None:
                entry.setdefault(key, _text(child))
            elif child.tag == f"{{{ATOM_NS}}}link":
                link = self._atom_link(child)
                if link:
                    links.append(link)
        
        _add_snippet(entry)
        if links:
            entry["links"] = links
        return entry
    
    def _parse_atom_entry(self, item: ET.Element) -> RawEntry:
        entry: RawEntry = {}
        links: list[dict[str, str]] = []
        
        for child in item:
            key = ATOM_FIELDS.get(_split_tag(child.tag))
            if key is not None:
                entry.setdefault(key, _text(child))
            elif child.tag == f"{{{ATOM_NS}}}link":
                link = self._atom_link(child)
                if link:
                    links.append(link)
        
        _add_snippet(entry)
        if links:
            entry["links"] = links
            alternate = next(
                (link["url"] for link in links if link["rel"] == "alternate"),
                None,
            )
            if alternate:
                entry["link"] = alternate
        return entry
    
    @staticmethod
    def _atom_link(element: ET.Element) -> Optional[dict[str, str]]:
        href = (element.get("href") or "").strip()
        if not href:
            return None
        return {"url": href, "rel": element.get("rel") or "alternate"}
