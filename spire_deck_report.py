#!/usr/bin/env python3
"""
Slay the Spire Deck Energy Cost Report

Reads a plain-text deck list, validates each entry against the known card
names, totals the energy cost, renders an energy-cost histogram (PNG) and
writes a one-document PDF summary.

Each line of the deck file is one card:

    Strike:1
    Crush:3
    Genetic Algorithm : 1

Lines that do not have exactly one colon, name an unknown card, or carry a
cost outside 0-6 are collected as invalid entries and listed at the end of
the report. A report is marked VOID (and skips the histogram and the invalid
listing) when the deck holds more than 1000 valid cards or more than 10
invalid entries.

Usage:
    python spire_deck_report.py deck.txt --outdir reports
    python spire_deck_report.py            # prompts for the deck file name

Outputs:
    energy_histogram.png               640x480 bar chart, overwritten each run
    SpireDeck <deck id>.pdf            standard report
    SpireDeck <deck id>(VOID).pdf      void report

Dependencies:
    - Pillow
    - reportlab
"""
from __future__ import annotations

import argparse
import io
import math
import os
import random
import re
import sys
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Sequence, Tuple

from PIL import Image, ImageDraw, ImageFont
from reportlab.pdfgen import canvas as pdf_canvas
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader, simpleSplit

# Constants
DECK_ID_LENGTH = 9
MAX_CARDS = 1000
MAX_INVALID_CARDS = 10
MIN_COST = 0
MAX_COST = 6
DEFAULT_VALID_CARDS = (
    "Strike",
    "Genetic Algorithm",
    "Crush",
    "Biased Cognition",
    "All For One",
)
DEFAULT_REPORT_PREFIX = "SpireDeck"
HISTOGRAM_FILENAME = "energy_histogram.png"
HISTOGRAM_SIZE = (640, 480)
REPORT_TITLE = "Slay the Spire Deck Energy Cost Report"
PAGE_MARGIN_PT = 50
TITLE_FONT = ("Helvetica-Bold", 16)
BODY_FONT = ("Helvetica", 12)
HEADING_FONT = ("Helvetica-Bold", 12)

COST_PATTERN = re.compile(r"[+-]?[0-9]+")
DECK_ID_PATTERN = re.compile(r"[0-9]{%d}" % DECK_ID_LENGTH)


# ----------------------------- Utilities -------------------------------------

def info(msg: str) -> None:
    print(f"[INFO] {msg}")


def warn(msg: str) -> None:
    print(f"[WARN] {msg}")


def error(msg: str) -> None:
    print(f"[ERROR] {msg}")


def fit_font(size: int) -> ImageFont.ImageFont:
    try:
        return ImageFont.truetype("DejaVuSans.ttf", size=size)
    except OSError:
        return ImageFont.load_default()


def text_size(draw: ImageDraw.ImageDraw, text: str, font: ImageFont.ImageFont) -> Tuple[int, int]:
    bbox = draw.textbbox((0, 0), text, font=font)
    return bbox[2] - bbox[0], bbox[3] - bbox[1]


def generate_deck_id(rng: Optional[random.Random] = None) -> str:
    """Random zero-padded deck ID. Not checked for uniqueness across runs."""
    rng = rng or random.Random()
    return f"{rng.randrange(10 ** DECK_ID_LENGTH):0{DECK_ID_LENGTH}d}"


# --------------------------- Data Model --------------------------------------

@dataclass
class AnalyzerConfig:
    valid_cards: FrozenSet[str] = frozenset(DEFAULT_VALID_CARDS)
    max_cards: int = MAX_CARDS
    max_invalid_cards: int = MAX_INVALID_CARDS
    outdir: str = "."
    report_prefix: str = DEFAULT_REPORT_PREFIX
    histogram_name: str = HISTOGRAM_FILENAME

    @property
    def histogram_path(self) -> str:
        return os.path.join(self.outdir, self.histogram_name)


@dataclass
class DeckReadResult:
    energy_costs: List[int] = field(default_factory=list)
    invalid_cards: List[str] = field(default_factory=list)
    ok: bool = True


@dataclass
class ReportItem:
    kind: str  # "text" or "image"
    value: str
    font: Tuple[str, int] = BODY_FONT


# --------------------------- Deck Reading ------------------------------------

def parse_entry(line: str, config: AnalyzerConfig) -> Optional[int]:
    """Return the energy cost of a ``<card name>:<cost>`` line, or None if the line is invalid."""
    if line.count(":") != 1:
        return None
    name, cost_str = (part.strip() for part in line.split(":"))
    if not name or name not in config.valid_cards:
        return None
    if not COST_PATTERN.fullmatch(cost_str):
        return None
    cost = int(cost_str)
    if not MIN_COST <= cost <= MAX_COST:
        return None
    return cost


def read_deck(path: str, config: AnalyzerConfig) -> DeckReadResult:
    """Read a deck file into valid energy costs and rejected raw lines.

    Blank lines are invalid entries. Bytes that are not UTF-8 are replaced,
    so they only invalidate their own line. If the file cannot be opened the
    error is printed and an empty result with ``ok=False`` is returned.
    """
    result = DeckReadResult()
    try:
        with open(path, "r", encoding="utf-8-sig", errors="replace") as f:
            for raw in f:
                line = raw.rstrip("\r\n")
                cost = parse_entry(line, config)
                if cost is None:
                    result.invalid_cards.append(line)
                else:
                    result.energy_costs.append(cost)
    except OSError as e:
        error(f"Could not read deck file {path}: {e}")
        return DeckReadResult(ok=False)
    return result


# --------------------------- Aggregation -------------------------------------

def total_energy_cost(energy_costs: Sequence[int]) -> int:
    return sum(energy_costs)


def count_costs(energy_costs: Sequence[int]) -> List[int]:
    counts = [0] * (MAX_COST - MIN_COST + 1)
    for cost in energy_costs:
        if MIN_COST <= cost <= MAX_COST:
            counts[cost - MIN_COST] += 1
    return counts


def is_void(deck: DeckReadResult, config: AnalyzerConfig) -> bool:
    return len(deck.energy_costs) > config.max_cards or len(deck.invalid_cards) > config.max_invalid_cards


# --------------------------- Rendering ---------------------------------------

def y_axis_ticks(max_count: int, target_ticks: int = 5) -> List[int]:
    """Integer tick values from 0 up to a round top at or above max_count."""
    if max_count <= 0:
        return [0, 1]
    step = max(1, math.ceil(max_count / target_ticks))
    top = step * math.ceil(max_count / step)
    return list(range(0, top + 1, step))


def render_histogram_image(energy_costs: Sequence[int], size: Tuple[int, int] = HISTOGRAM_SIZE) -> Image.Image:
    W, H = size
    counts = count_costs(energy_costs)
    base = Image.new("RGB", (W, H), (255, 255, 255))
    draw = ImageDraw.Draw(base)

    title_font = fit_font(20)
    label_font = fit_font(14)
    tick_font = fit_font(12)

    left, right, top, bottom = 80, W - 24, 56, H - 64
    plot_w = right - left
    plot_h = bottom - top

    title = "Energy Cost Distribution"
    tw, _ = text_size(draw, title, title_font)
    draw.text(((W - tw) // 2, 16), title, font=title_font, fill=(0, 0, 0))

    ticks = y_axis_ticks(max(counts))
    y_top = ticks[-1]
    draw.rectangle((left, top, right, bottom), fill=(240, 240, 240))
    for tick in ticks:
        ty = bottom - int(plot_h * tick / y_top)
        draw.line((left, ty, right, ty), fill=(200, 200, 200))
        label = str(tick)
        lw, lh = text_size(draw, label, tick_font)
        draw.text((left - lw - 8, ty - lh // 2 - 2), label, font=tick_font, fill=(60, 60, 60))

    slot_w = plot_w / len(counts)
    bar_w = slot_w * 0.6
    for idx, count in enumerate(counts):
        cx = left + slot_w * idx + slot_w / 2
        if count:
            bar_top = bottom - plot_h * count / y_top
            draw.rectangle((cx - bar_w / 2, bar_top, cx + bar_w / 2, bottom), fill=(204, 68, 68))
        label = str(idx + MIN_COST)
        lw, _ = text_size(draw, label, tick_font)
        draw.text((cx - lw / 2, bottom + 6), label, font=tick_font, fill=(60, 60, 60))

    draw.line((left, top, left, bottom), fill=(90, 90, 90))
    draw.line((left, bottom, right, bottom), fill=(90, 90, 90))

    x_label = "Energy Cost"
    lw, _ = text_size(draw, x_label, label_font)
    draw.text((left + (plot_w - lw) // 2, bottom + 30), x_label, font=label_font, fill=(0, 0, 0))

    # Y label is drawn horizontally on its own layer, then rotated into place.
    y_label = "Number of Cards"
    lw, lh = text_size(draw, y_label, label_font)
    layer = Image.new("RGBA", (lw + 4, lh + 8), (0, 0, 0, 0))
    ImageDraw.Draw(layer).text((2, 0), y_label, font=label_font, fill=(0, 0, 0, 255))
    layer = layer.rotate(90, expand=True)
    base.paste(layer, (16, top + (plot_h - layer.size[1]) // 2), layer)
    return base


def render_histogram(energy_costs: Sequence[int], outfile: str) -> str:
    """Write the energy-cost bar chart to outfile as PNG. Errors propagate to the caller."""
    img = render_histogram_image(energy_costs)
    outdir = os.path.dirname(outfile)
    if outdir:
        os.makedirs(outdir, exist_ok=True)
    img.save(outfile, format="PNG")
    info(f"Saved {outfile}")
    return outfile


# --------------------------- PDF Layout --------------------------------------

def report_filename(deck_id: str, void: bool, config: AnalyzerConfig) -> str:
    return f"{config.report_prefix} {deck_id}{'(VOID)' if void else ''}.pdf"


def build_report_items(deck_id: str, total_cost: int, invalid_cards: Sequence[str], void: bool, histogram_path: Optional[str]) -> List[ReportItem]:
    items = [
        ReportItem("text", REPORT_TITLE, TITLE_FONT),
        ReportItem("text", f"Deck ID: {deck_id}"),
        ReportItem("text", f"Total Energy Cost: {total_cost} energy"),
    ]
    if histogram_path:
        items.append(ReportItem("image", histogram_path))
    if not void and invalid_cards:
        items.append(ReportItem("text", "Invalid Cards:", HEADING_FONT))
        items.extend(ReportItem("text", card) for card in invalid_cards)
    return items


def compose_report_pdf(items: Sequence[ReportItem], outfile: str) -> None:
    page_w, page_h = A4
    usable_w = page_w - 2 * PAGE_MARGIN_PT
    c = pdf_canvas.Canvas(outfile, pagesize=A4)
    c.setTitle(REPORT_TITLE)
    y = page_h - PAGE_MARGIN_PT

    def ensure_room(height: float) -> float:
        if y - height < PAGE_MARGIN_PT:
            c.showPage()
            return page_h - PAGE_MARGIN_PT
        return y

    for item in items:
        if item.kind == "image":
            with Image.open(item.value) as img:
                img_rgb = img.convert("RGB")
            iw, ih = img_rgb.size
            w_pt = min(usable_w, float(iw))
            h_pt = ih * w_pt / iw
            buf = io.BytesIO()
            img_rgb.save(buf, format="PNG")
            y = ensure_room(h_pt)
            c.drawImage(ImageReader(io.BytesIO(buf.getvalue())), PAGE_MARGIN_PT, y - h_pt, width=w_pt, height=h_pt)
            y -= h_pt + 12
            continue
        font_name, font_size = item.font
        leading = font_size * 1.4
        for line in simpleSplit(item.value, font_name, font_size, usable_w) or [""]:
            y = ensure_room(leading)
            c.setFont(font_name, font_size)
            c.drawString(PAGE_MARGIN_PT, y - font_size, line)
            y -= leading
    c.showPage()
    c.save()


def generate_pdf_report(deck_id: str, total_cost: int, invalid_cards: Sequence[str], void: bool, config: AnalyzerConfig, histogram_path: Optional[str] = None) -> Optional[str]:
    """Write the deck report PDF and return its path, or None if it could not be written.

    The histogram is embedded only when histogram_path names an existing file.
    """
    outfile = os.path.join(config.outdir, report_filename(deck_id, void, config))
    if histogram_path and not os.path.isfile(histogram_path):
        warn(f"Histogram image not found: {histogram_path}. Report will not include it.")
        histogram_path = None
    try:
        os.makedirs(config.outdir, exist_ok=True)
        items = build_report_items(deck_id, total_cost, invalid_cards, void, histogram_path)
        compose_report_pdf(items, outfile)
    except Exception as e:
        error(f"Error generating PDF: {e}")
        return None
    info(f"PDF Report generated: {outfile}")
    return outfile


# --------------------------- Driver ------------------------------------------

def run(deck_path: str, config: AnalyzerConfig, deck_id: Optional[str] = None, rng: Optional[random.Random] = None) -> Optional[str]:
    """Read, aggregate, render and report. Returns the report path, or None when nothing was written."""
    deck_id = deck_id or generate_deck_id(rng)
    deck = read_deck(deck_path, config)
    if not deck.ok:
        return None
    if not deck.energy_costs:
        info("No valid data found in the file.")
        return None

    total_cost = total_energy_cost(deck.energy_costs)
    info(f"Deck {deck_id}: {len(deck.energy_costs)} valid cards, {len(deck.invalid_cards)} invalid entries, total energy cost {total_cost}")

    if is_void(deck, config):
        warn(f"Deck exceeds limits ({config.max_cards} cards / {config.max_invalid_cards} invalid entries); generating void report.")
        return generate_pdf_report(deck_id, total_cost, deck.invalid_cards, True, config)

    histogram_path: Optional[str] = config.histogram_path
    try:
        render_histogram(deck.energy_costs, histogram_path)
    except Exception as e:
        error(f"Error creating histogram: {e}")
        histogram_path = None

    return generate_pdf_report(deck_id, total_cost, deck.invalid_cards, False, config, histogram_path)


# --------------------------- CLI ---------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Slay the Spire Deck Energy Cost Report")
    parser.add_argument("deck", nargs="?", help="Deck file with one '<card name>:<energy cost>' per line (prompted for if omitted)")
    parser.add_argument("--outdir", default=".", help="Directory for the histogram PNG and the PDF report")
    parser.add_argument("--prefix", default=DEFAULT_REPORT_PREFIX, help="Report file name prefix")
    parser.add_argument("--max-cards", type=int, default=MAX_CARDS, help="Valid card count above which the report is void (default 1000)")
    parser.add_argument("--max-invalid", type=int, default=MAX_INVALID_CARDS, help="Invalid entry count above which the report is void (default 10)")
    parser.add_argument("--card", action="append", default=None, help="Accepted card name; repeat to replace the built-in card list")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the deck ID generator")
    parser.add_argument("--deck-id", default=None, help=f"Use this {DECK_ID_LENGTH}-digit deck ID instead of a random one")
    args = parser.parse_args(argv)

    if args.deck_id is not None and not DECK_ID_PATTERN.fullmatch(args.deck_id):
        parser.error(f"--deck-id must be exactly {DECK_ID_LENGTH} digits")
    if args.max_cards < 0 or args.max_invalid < 0:
        parser.error("--max-cards and --max-invalid must be non-negative")

    deck_path = args.deck
    if not deck_path:
        try:
            deck_path = input("Enter the deck file name: ").strip()
        except EOFError:
            deck_path = ""
    if not deck_path:
        error("No deck file given.")
        return 1

    cards = frozenset(name.strip() for name in args.card if name.strip()) if args.card else frozenset(DEFAULT_VALID_CARDS)
    config = AnalyzerConfig(
        valid_cards=cards,
        max_cards=args.max_cards,
        max_invalid_cards=args.max_invalid,
        outdir=args.outdir,
        report_prefix=args.prefix,
    )
    rng = random.Random(args.seed) if args.seed is not None else None

    report = run(deck_path, config, deck_id=args.deck_id, rng=rng)
    return 0 if report else 1


if __name__ == "__main__":
    sys.exit(main())
