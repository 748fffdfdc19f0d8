"""Shared pytest fixtures for crawler tests."""

from datetime import datetime

import pytest

from wasgeit.adapters import AdapterSet, build_adapter_set
from wasgeit.models import Event, Venue
from wasgeit.registry import VenueRegistry, build_registry


# Reference crawl time; year-less dates in January roll over into 2025
NOW = datetime(2024, 12, 20, 18, 0)


@pytest.fixture
def now() -> datetime:
    """Provide the fixed reference time."""
    return NOW


@pytest.fixture
def registry() -> VenueRegistry:
    """Provide the registry built from the default config."""
    return build_registry()


@pytest.fixture
def adapters(registry: VenueRegistry) -> AdapterSet:
    """Provide the full adapter set."""
    return build_adapter_set(registry)


@pytest.fixture
def sample_venue() -> Venue:
    """Provide the Dachstock venue."""
    return Venue(short_name="dachstock", name="Dachstock", url="https://www.dachstock.ch")


@pytest.fixture
def sample_event(sample_venue: Venue) -> Event:
    """Provide a sample event."""
    return Event(
        title="Bonaparte",
        start=datetime(2025, 2, 7, 19, 30),
        link="https://www.dachstock.ch/events/99",
        venue=sample_venue,
    )


# One well-formed program page per venue, with the event it must produce:
# (html, title, start, time_known, link)
VENUE_PAGES = {
    "isc": (
        """
        <div class="page_programm">
          <a class="event_preview" href="/event/42">
            <div class="event_title_date">10.01.</div>
            <div class="event_title_title">Los Sampler's</div>
          </a>
        </div>
        """,
        "Los Sampler's",
        datetime(2025, 1, 10, 0, 0),
        False,
        "https://www.isc-club.ch/event/42",
    ),
    "kiff": (
        """
        <div class="programm-grid">
          <a class="teaserlink" href="/teaser"><div class="event-date">Mo 01 Jan</div></a>
          <a href="/de/programm/123">
            <div class="event-date">Sa 11 Jan</div>
            <div class="event-title-wrapper"><h2>Zeal &amp; Ardor</h2></div>
          </a>
        </div>
        """,
        "Zeal & Ardor",
        datetime(2025, 1, 11, 0, 0),
        False,
        "https://www.kiff.ch/de/programm/123",
    ),
    "kofmehl": (
        """
        <div class="events__element">
          <time>Fr 17.01.2025</time>
          <h3 class="events__title">Hecht</h3>
          <a class="events__link" href="https://www.kofmehl.net/events/hecht">Mehr</a>
        </div>
        """,
        "Hecht",
        datetime(2025, 1, 17, 0, 0),
        False,
        "https://www.kofmehl.net/events/hecht",
    ),
    "kairo": (
        """
        <article id="konzert-17">
          <h1>Sophie Hunger</h1>
          <p><span class="concerts_date">Sa 25.01.2025</span>
             Konzert 20:30</p>
        </article>
        """,
        "Sophie Hunger",
        datetime(2025, 1, 25, 20, 30),
        True,
        "https://www.cafe-kairo.ch/kultur#konzert-17",
    ),
    "coq-d-or": (
        """
        <div id="main">
          <table class="shows"><tr><td>Programm</td></tr></table>
          <table>
            <tr>
              <td class="list_first"><a href="#">Freitag, 24.01.25</a></td>
              <td class="list_second">
                <h2><a href="/konzert/55">Kadavar</a></h2>
                <div class="entry">Türöffnung 20:00</div>
              </td>
            </tr>
          </table>
        </div>
        """,
        "Kadavar",
        datetime(2025, 1, 24, 20, 0),
        True,
        "https://www.coqdor.ch/konzert/55",
    ),
    "dachstock": (
        """
        <div class="event event-list" data-url="https://www.dachstock.ch/events/99">
          <h3>Bonaparte</h3>
          <div class="event-date">Fr 7.2 2025 - Doors: 19:30</div>
        </div>
        """,
        "Bonaparte",
        datetime(2025, 2, 7, 19, 30),
        True,
        "https://www.dachstock.ch/events/99",
    ),
    "turnhalle": (
        """
        <div class="event">
          <h4>Mi, 15. 01. 25 | 21:00</h4>
          <h2>Jazz Jam</h2>
          <a href="/programm/jazz-jam">Details</a>
        </div>
        """,
        "Jazz Jam",
        datetime(2025, 1, 15, 21, 0),
        True,
        "https://www.turnhalle.ch/programm/jazz-jam",
    ),
    "brasserie-lorraine": (
        """
        <div class="type-tribe_events">
          <h2 class="tribe-events-list-event-title">
            <a href="https://www.brasserie-lorraine.ch/event/duo-x/">Duo X</a>
          </h2>
          <span class="tribe-event-date-start">January 9 @ 8:00 pm</span>
        </div>
        """,
        "Duo X",
        datetime(2025, 1, 9, 0, 0),
        False,
        "https://www.brasserie-lorraine.ch/event/duo-x/",
    ),
    "mahogany-hall": (
        """
        <div class="view-konzerte">
          <div class="views-row">
            <div class="views-field-title"><h2><a href="/konzerte/blues-night">Blues Night</a></h2></div>
            <div class="concert-tueroeffnung">Türöffnung: Freitag,
              7. February 2025 | 20.00 Uhr</div>
          </div>
        </div>
        """,
        "Blues Night",
        datetime(2025, 2, 7, 20, 0),
        True,
        "https://www.mahogany.ch/konzerte/blues-night",
    ),
    "heitere-fahne": (
        """
        <div class="events">
          <div class="event">
            <div class="meta"><span class="date">Sa 18.01.2025</span>
              <span class="time">Tür 19:30 / Beginn 20:00</span></div>
            <div class="alpha omega text"><div class="inner">
              <h2><a href="/programm/fahne-fest">Fahne Fest</a></h2>
            </div></div>
          </div>
        </div>
        """,
        "Fahne Fest",
        datetime(2025, 1, 18, 19, 30),
        True,
        "https://www.dieheiterefahne.ch/programm/fahne-fest",
    ),
    "ono": (
        """
        <div class="EventItem">
          <div class="EventImage"><a href="/programm/ono-jazz"><img src="x.jpg"></a></div>
          <div class="EventTextTitle">Ono Jazz Session</div>
          <div class="EventInfo subnav">Do&nbsp;23.01.25 | Bar 19:00 | Konzert 20:00</div>
        </div>
        """,
        "Ono Jazz Session",
        datetime(2025, 1, 23, 19, 0),
        True,
        "https://www.onobern.ch/programm/ono-jazz",
    ),
    "marta": (
        """
        <table class="music"><tbody>
          <tr>
            <td>30.01.2025</td>
            <td>Do</td>
            <td><p>Marta Trio</p><a href="/musik/marta-trio">mehr</a></td>
            <td>ab 20:00</td>
          </tr>
        </tbody></table>
        """,
        "Marta Trio",
        datetime(2025, 1, 30, 20, 0),
        True,
        "https://www.cafemarta.ch/musik/marta-trio",
    ),
    "bierhuebeli": (
        """
        <ul class="bh-event-list all-events">
          <li>
            <div class="evendates">Termin: 31.01.25</div>
            <div class="eventlink"><a href="https://www.bierhuebeli.ch/event/stiller-has">Stiller Has</a></div>
          </li>
        </ul>
        """,
        "Stiller Has",
        datetime(2025, 1, 31, 0, 0),
        False,
        "https://www.bierhuebeli.ch/event/stiller-has",
    ),
    "dampfzentrale": (
        """
        <article data-date="4" data-month="2">
          <div id="event-301">
            <div class="agenda-container">
              <h1 class="agenda-title">Tanzfest</h1>
              <div class="agenda-details"><span class="span1">19:00</span></div>
            </div>
          </div>
        </article>
        """,
        "Tanzfest",
        datetime(2025, 2, 4, 19, 0),
        True,
        "https://www.dampfzentrale.ch/programm/#event-301",
    ),
}


@pytest.fixture
def venue_pages() -> dict:
    """Provide one well-formed program page per venue."""
    return VENUE_PAGES
