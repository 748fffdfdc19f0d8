"""
Adapters for the supported venues.

Offsets passed to slice_text() are character offsets into the text after
clean_whitespace(). They follow the markup each site served when the adapter
was written; a site relaunch usually shows up as extraction failures for
every fragment of that venue.
"""

import re

from bs4 import Tag

from ..models import DateTimeFormat, RawDateTime
from ..normalize import (
    capture_date_time,
    clean_whitespace,
    find_time,
    pad_day,
    slice_text,
)
from .base import (
    VenueAdapter,
    optional_attr,
    select_attr,
    select_required,
    select_text,
)


# "2.1 2024 - Doors: 20:00" -> ("2.1 2024", "20:00")
DOORS_RE = re.compile(r"(\d{1,2}\.\d{1,2} \d{4}) - Doors: (\d{2}:\d{2})")


class IscAdapter(VenueAdapter):
    """Date only, year-less: '12.01.'."""

    venue_key = "isc"
    fragment_selector = ".page_programm a.event_preview"
    title_selector = ".event_title_title"
    date_time_format = DateTimeFormat(date="%d.%m.")

    def extract_date_time(self, fragment: Tag) -> RawDateTime:
        return RawDateTime(date_text=select_text(fragment, ".event_title_date"))

    def extract_link(self, fragment: Tag) -> str:
        return optional_attr(fragment, "href")


class KiffAdapter(VenueAdapter):
    """'Fr 12 Jan': skip the 3-character weekday prefix, year-less."""

    venue_key = "kiff"
    fragment_selector = ".programm-grid a:not(.teaserlink)"
    title_selector = ".event-title-wrapper > h2"
    date_time_format = DateTimeFormat(date="%d %b")

    def extract_date_time(self, fragment: Tag) -> RawDateTime:
        text = clean_whitespace(select_text(fragment, ".event-date"))
        return RawDateTime(date_text=slice_text(text, 3))

    def extract_link(self, fragment: Tag) -> str:
        return optional_attr(fragment, "href")


class KofmehlAdapter(VenueAdapter):
    """'Fr 12.01.2024': characters 3-8 hold 'dd.mm', the year is ignored."""

    venue_key = "kofmehl"
    fragment_selector = ".events__element"
    title_selector = ".events__title"
    date_time_format = DateTimeFormat(date="%d.%m")

    def extract_date_time(self, fragment: Tag) -> RawDateTime:
        text = clean_whitespace(select_text(fragment, "time"))
        return RawDateTime(date_text=slice_text(text, 3, 8))

    def extract_link(self, fragment: Tag) -> str:
        return select_attr(fragment, "a.events__link", "href")


class KairoAdapter(VenueAdapter):
    """'Fr 12.01.2024 ... 20:00': date at characters 3-13, first HH:MM is the time."""

    venue_key = "kairo"
    fragment_selector = "article[id]"
    title_selector = "h1"
    date_time_format = DateTimeFormat(date="%d.%m.%Y", time="%H:%M")

    def extract_date_time(self, fragment: Tag) -> RawDateTime:
        container = select_required(fragment, ".concerts_date").parent
        text = clean_whitespace(container.get_text(" "))
        return RawDateTime(date_text=slice_text(text, 3, 13), time_text=find_time(text))

    def extract_link(self, fragment: Tag) -> str:
        anchor = optional_attr(fragment, "id")
        return f"#{anchor}" if anchor else ""


class CoqDorAdapter(VenueAdapter):
    """'Freitag, 12.01.24': the date follows the first ', '; time from the entry text."""

    venue_key = "coq-d-or"
    fragment_selector = "#main table:not(.shows)"
    title_selector = "td.list_second h2"
    date_time_format = DateTimeFormat(date="%d.%m.%y", time="%H:%M")

    def extract_date_time(self, fragment: Tag) -> RawDateTime:
        text = clean_whitespace(select_text(fragment, "td.list_first a"))
        date_text = text.split(", ")[1]
        time_text = find_time(select_text(fragment, "div.entry"))
        return RawDateTime(date_text=date_text, time_text=time_text)

    def extract_link(self, fragment: Tag) -> str:
        return select_attr(fragment, "td.list_second h2 a", "href")


class DachstockAdapter(VenueAdapter):
    """'Fr 2.1 2024 - Doors: 20:00': date and doors time captured by DOORS_RE."""

    venue_key = "dachstock"
    fragment_selector = ".event.event-list"
    title_selector = "h3"
    date_time_format = DateTimeFormat(date="%d.%m %Y", time="%H:%M")

    def extract_date_time(self, fragment: Tag) -> RawDateTime:
        text = clean_whitespace(select_text(fragment, ".event-date"))
        raw = capture_date_time(DOORS_RE, text)
        return RawDateTime(date_text=pad_day(raw.date_text), time_text=raw.time_text)

    def extract_link(self, fragment: Tag) -> str:
        return optional_attr(fragment, "data-url")


class TurnhalleAdapter(VenueAdapter):
    """'Fr, 12. 01. 24 | 20:00': date at characters 4-14; the time is often missing."""

    venue_key = "turnhalle"
    fragment_selector = ".event"
    title_selector = "h2"
    date_time_format = DateTimeFormat(date="%d. %m. %y", time="%H:%M")

    def extract_date_time(self, fragment: Tag) -> RawDateTime:
        text = clean_whitespace(select_text(fragment, "h4"))
        return RawDateTime(date_text=slice_text(text, 4, 14), time_text=find_time(text))

    def extract_link(self, fragment: Tag) -> str:
        return select_attr(fragment, "a", "href")


class BrasserieLorraineAdapter(VenueAdapter):
    """'January 12 @ 8:00 pm': month name and day before ' @ ', year-less."""

    venue_key = "brasserie-lorraine"
    fragment_selector = ".type-tribe_events"
    title_selector = ".tribe-events-list-event-title"
    date_time_format = DateTimeFormat(date="%B %d")

    def extract_date_time(self, fragment: Tag) -> RawDateTime:
        text = clean_whitespace(select_text(fragment, ".tribe-event-date-start"))
        return RawDateTime(date_text=text.partition(" @ ")[0])

    def extract_link(self, fragment: Tag) -> str:
        return select_attr(fragment, "h2 > a", "href")


class MahoganyHallAdapter(VenueAdapter):
    """'Türöffnung: Freitag, 2. February 2024 | 20.00 Uhr'."""

    venue_key = "mahogany-hall"
    fragment_selector = ".view-konzerte .views-row"
    title_selector = ".views-field-title h2"
    date_time_format = DateTimeFormat(date="%d. %B %Y", time="%H.%M")

    def extract_date_time(self, fragment: Tag) -> RawDateTime:
        text = clean_whitespace(select_text(fragment, ".concert-tueroeffnung"))
        text = text.split(", ")[1].split("Uhr")[0]
        date_text, _, time_text = pad_day(text).partition("|")
        return RawDateTime(date_text=date_text, time_text=time_text)

    def extract_link(self, fragment: Tag) -> str:
        return select_attr(fragment, ".views-field-title h2 a", "href")


class HeitereFahneAdapter(VenueAdapter):
    """'Sa 13.01.2024 Tür 19:30 Beginn 20:00': date at characters 3-13, doors time first."""

    venue_key = "heitere-fahne"
    fragment_selector = ".events .event"
    title_selector = ".alpha.omega.text .inner h2 a"
    date_time_format = DateTimeFormat(date="%d.%m.%Y", time="%H:%M")

    def extract_date_time(self, fragment: Tag) -> RawDateTime:
        container = select_required(fragment, ".date + .time").parent
        text = clean_whitespace(container.get_text(" "))
        return RawDateTime(date_text=slice_text(text, 3, 13), time_text=find_time(text))

    def extract_link(self, fragment: Tag) -> str:
        return select_attr(fragment, self.title_selector, "href")


class OnoAdapter(VenueAdapter):
    """'Fr 12.01.24 | Bar 19:00': date at characters 3-11, first HH:MM is the time."""

    venue_key = "ono"
    fragment_selector = ".EventItem"
    title_selector = ".EventTextTitle"
    date_time_format = DateTimeFormat(date="%d.%m.%y", time="%H:%M")

    def extract_date_time(self, fragment: Tag) -> RawDateTime:
        text = clean_whitespace(select_text(fragment, ".EventInfo.subnav"))
        return RawDateTime(date_text=slice_text(text, 3, 11), time_text=find_time(text))

    def extract_link(self, fragment: Tag) -> str:
        return select_attr(fragment, ".EventImage a", "href")


class MartaAdapter(VenueAdapter):
    """Table row: date in the first cell, time in the fourth."""

    venue_key = "marta"
    fragment_selector = "table.music tbody tr"
    title_selector = "td:nth-child(3) p"
    date_time_format = DateTimeFormat(date="%d.%m.%Y", time="%H:%M")

    def extract_date_time(self, fragment: Tag) -> RawDateTime:
        return RawDateTime(
            date_text=select_text(fragment, "td:nth-child(1)"),
            time_text=find_time(select_text(fragment, "td:nth-child(4)")),
        )

    def extract_link(self, fragment: Tag) -> str:
        return select_attr(fragment, "td:nth-child(3) a", "href")


class BierhuebeliAdapter(VenueAdapter):
    """'Termin: 12.01.24': skip the 8-character label, take 'dd.mm.yy'."""

    venue_key = "bierhuebeli"
    fragment_selector = "ul.bh-event-list.all-events li"
    title_selector = ".eventlink a"
    date_time_format = DateTimeFormat(date="%d.%m.%y")

    def extract_date_time(self, fragment: Tag) -> RawDateTime:
        text = clean_whitespace(select_text(fragment, ".evendates"))
        return RawDateTime(date_text=slice_text(text, 8, 16))

    def extract_link(self, fragment: Tag) -> str:
        return select_attr(fragment, ".eventlink a", "href")


class DampfzentraleAdapter(VenueAdapter):
    """Day and month come from data attributes on the enclosing article, year-less."""

    venue_key = "dampfzentrale"
    fragment_selector = "article .agenda-container"
    title_selector = "h1.agenda-title"
    date_time_format = DateTimeFormat(date="%d.%m.", time="%H:%M")

    def extract_date_time(self, fragment: Tag) -> RawDateTime:
        article = fragment.parent.parent
        day = optional_attr(article, "data-date")
        month = optional_attr(article, "data-month")
        time_text = find_time(select_text(fragment, ".agenda-details .span1"))
        return RawDateTime(date_text=f"{day}.{month}.", time_text=time_text)

    def extract_link(self, fragment: Tag) -> str:
        anchor = optional_attr(fragment.parent, "id")
        return f"#{anchor}" if anchor else ""


# Declaration order is the bulk crawl order
ADAPTER_CLASSES: tuple[type[VenueAdapter], ...] = (
    IscAdapter,
    KiffAdapter,
    KofmehlAdapter,
    KairoAdapter,
    CoqDorAdapter,
    DachstockAdapter,
    TurnhalleAdapter,
    BrasserieLorraineAdapter,
    MahoganyHallAdapter,
    HeitereFahneAdapter,
    OnoAdapter,
    MartaAdapter,
    BierhuebeliAdapter,
    DampfzentraleAdapter,
)
