from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple
from urllib.parse import quote, unquote, urlsplit

from bs4 import BeautifulSoup
from bs4.element import (
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    ProcessingInstruction,
    Tag,
)

from enru.entries import Article

LOGGER = logging.getLogger(__name__)

WORD_LINK_RE = re.compile(
    r"(?P<entity>&#?\w+;)|(?<![\w'])[\w']+(?![^<]*>)(?![^<>]*?</abbr>)",
    re.IGNORECASE,
)
LIST_ITEM_RE = re.compile(r"<li>", re.IGNORECASE)
COMMA_RE = re.compile(r",(?! )")
WHITESPACE_RE = re.compile(r"\s+")

BODY_COLOR = "#000000"
SENSE_COLOR = "#8E8E93"
ABBREVIATION_COLOR = "#34C759"

DOCUMENT_STYLE = f"""<style type="text/css">
    BODY {{ font: -apple-system-body; color: {BODY_COLOR}; }}
    ABBR {{ color: {ABBREVIATION_COLOR}; }}
    E {{ color: {SENSE_COLOR}; display: list-item; }}
    HR {{ display: none; }}
    A {{ font: inherit; color: inherit; text-decoration: inherit; }}
    H5 {{ text-align: right; }}
    p {{ margin: 0; padding: 0; }}
</style>"""

SKIPPED_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)
HIDDEN_TAGS = {"style", "script", "hr", "head", "title"}
BLOCK_TAGS = {"li", "e", "h5", "p", "ol", "ul", "div", "br"}


def linkify(text: str) -> str:
    """Turn every word outside tags and abbreviations into a search link."""

    def make_link(match: re.Match[str]) -> str:
        token = match.group(0)
        if match.group("entity"):
            return token
        return f'<a href="{quote(token, safe="")}">{token}</a>'

    return WORD_LINK_RE.sub(make_link, text)


def normalize_tags(text: str) -> str:
    return (
        text.replace("<P>", "<li>")
        .replace("</P>", "</li>")
        .replace("\n\n", "\n")
    )


def normalize_commas(text: str) -> str:
    return COMMA_RE.sub(", ", text)


def number_list_items(text: str) -> str:
    """Prefix list items with ``1. ``, ``2. `` ... when there are several."""
    if len(LIST_ITEM_RE.findall(text)) < 2:
        return text

    counter = 0

    def numbered(match: re.Match[str]) -> str:
        nonlocal counter
        counter += 1
        return f"{match.group(0)}{counter}. "

    return LIST_ITEM_RE.sub(numbered, text)


def assemble_document(body: str, transcription: str = "") -> str:
    return f"{DOCUMENT_STYLE}\n<H5>{transcription or ''}</H5>\n<OL>{body}</OL>"


def format_as_html(raw_article: str, transcription: str = "") -> str:
    source = linkify(raw_article or "")
    source = normalize_tags(source)
    source = normalize_commas(source)
    source = number_list_items(source)
    return assemble_document(source, transcription)


@dataclass(frozen=True)
class StyledRun:
    text: str
    color: str = BODY_COLOR
    link: Optional[str] = None
    sense: bool = False
    abbreviation: bool = False
    transcription: bool = False
    align_right: bool = False

    def same_style(self, other: "StyledRun") -> bool:
        return replace(self, text="") == replace(other, text="")


@dataclass(frozen=True)
class StyledDocument:
    runs: Tuple[StyledRun, ...] = field(default_factory=tuple)
    source: str = ""
    is_plain: bool = False

    @property
    def plain_text(self) -> str:
        return "".join(run.text for run in self.runs)

    @property
    def links(self) -> List[str]:
        return [run.link for run in self.runs if run.link]

    @classmethod
    def plain(cls, source: str) -> "StyledDocument":
        runs = (StyledRun(text=source),) if source else ()
        return cls(runs=runs, source=source, is_plain=True)


def _child_style(tag: Tag, parent: StyledRun) -> StyledRun:
    name = tag.name.lower()
    if name == "a":
        href = tag.get("href")
        return replace(parent, link=link_target_to_word(href) if href else parent.link)
    if name == "e":
        return replace(parent, sense=True, color=SENSE_COLOR)
    if name == "abbr":
        return replace(parent, abbreviation=True, color=ABBREVIATION_COLOR)
    if name == "h5":
        return replace(parent, transcription=True, align_right=True)
    return parent


def _break_line(runs: List[StyledRun]) -> None:
    if runs and not runs[-1].text.endswith("\n"):
        runs.append(StyledRun(text="\n"))


def _collect_runs(node: Tag, style: StyledRun, runs: List[StyledRun]) -> None:
    for child in node.children:
        if isinstance(child, SKIPPED_STRINGS):
            continue
        if isinstance(child, NavigableString):
            text = WHITESPACE_RE.sub(" ", str(child))
            at_line_start = not runs or runs[-1].text.endswith("\n")
            if at_line_start:
                text = text.lstrip()
            if text:
                runs.append(replace(style, text=text))
            continue
        if not isinstance(child, Tag):
            continue

        name = child.name.lower()
        if name in HIDDEN_TAGS:
            continue
        if name in BLOCK_TAGS:
            _break_line(runs)
        _collect_runs(child, _child_style(child, style), runs)
        if name in BLOCK_TAGS:
            _break_line(runs)


def _merge_runs(runs: List[StyledRun]) -> Tuple[StyledRun, ...]:
    merged: List[StyledRun] = []
    for run in runs:
        if run.text.endswith("\n") and run.text.strip() == "" and merged:
            # no trailing spaces before a line break
            last = merged[-1]
            merged[-1] = replace(last, text=last.text.rstrip(" "))
        if merged and merged[-1].same_style(run):
            merged[-1] = replace(merged[-1], text=merged[-1].text + run.text)
        else:
            merged.append(run)

    while merged and not merged[0].text.strip():
        merged.pop(0)
    while merged and not merged[-1].text.strip():
        merged.pop()
    if merged:
        merged[-1] = replace(merged[-1], text=merged[-1].text.rstrip())
    return tuple(run for run in merged if run.text)


def to_display_document(html: str) -> StyledDocument:
    """Styled runs for the host view; degrades to plain text on failure."""
    source = html or ""
    if not source:
        return StyledDocument()
    try:
        soup = BeautifulSoup(source, "html.parser")
        runs: List[StyledRun] = []
        _collect_runs(soup, StyledRun(text=""), runs)
        merged = _merge_runs(runs)
    except Exception as exc:  # noqa: BLE001
        LOGGER.warning("markup rendering failed, showing source text: %s", exc)
        return StyledDocument.plain(source)

    if not merged and strip_markup(source):
        return StyledDocument.plain(source)
    return StyledDocument(runs=merged, source=source)


def strip_markup(html: str) -> str:
    without_style = re.sub(r"<style.*?</style>", "", html or "", flags=re.IGNORECASE | re.DOTALL)
    return re.sub(r"<[^>]+>", "", without_style).strip()


def link_target_to_word(href: str) -> str:
    """Word encoded in a rendered link, as fed back into a new search."""
    if not href:
        return ""
    path = urlsplit(href).path or href
    segment = path.rstrip("/").rsplit("/", 1)[-1]
    return unquote(segment).strip()


@dataclass(frozen=True)
class RenderedArticle:
    article: Article
    html: str
    document: StyledDocument

    @property
    def transcription(self) -> str:
        return self.article.transcription


def render_article(article: Article) -> RenderedArticle:
    html = format_as_html(article.raw_text, article.transcription)
    return RenderedArticle(article=article, html=html, document=to_display_document(html))
