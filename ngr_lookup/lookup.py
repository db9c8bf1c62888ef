"""Postcode -> grid reference pipeline and the per-submission state machine.

    Idle -> Loading -> Success | NotFound | ConnectionError | Offline

Loading is entered synchronously on submit and left exactly once, when the
resolver settles. Each submission takes a sequence ticket and only the most
recent one may settle the session, so a slow earlier response can never
overwrite a later one. In-flight requests are not cancelled.
"""

import enum
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from .converter import convert
from .exceptions import ConnectionFailed, ConversionError, Offline, PostcodeNotFound
from .models import CALCULATION_ERROR, PostcodeLookup
from .resolver import PostcodeResolver, normalise_postcode, resolve

logger = logging.getLogger(__name__)


def lookup_postcode(query: str, resolver: Optional[PostcodeResolver] = None) -> PostcodeLookup:
    """Resolve *query* and convert the returned easting/northing.

    Lookup failures propagate as LookupFailure subclasses. A conversion
    failure does not: the grid reference becomes "Calculation Error", the
    derived lat/lon are left empty and the easting/northing are kept.
    """
    found = resolve(query, resolver)

    # A null easting/northing is a conversion failure, not the grid origin
    try:
        conv = convert(found.eastings, found.northings)
    except ConversionError:
        ngr, geo_lat, geo_lon = CALCULATION_ERROR, None, None
    else:
        ngr, geo_lat, geo_lon = conv.grid_ref, conv.latitude, conv.longitude

    return PostcodeLookup(
        postcode=found.postcode,
        eastings=found.eastings,
        northings=found.northings,
        ngr_formatted=ngr,
        geo_lat=geo_lat,
        geo_lon=geo_lon,
        latitude=found.latitude,
        longitude=found.longitude,
    )


class LookupState(enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    CONNECTION_ERROR = "connection_error"
    OFFLINE = "offline"


@dataclass(frozen=True)
class SessionSnapshot:
    """What the presentation layer renders: state, result and message."""

    state: LookupState = LookupState.IDLE
    query: Optional[str] = None
    result: Optional[PostcodeLookup] = None
    message: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.state is LookupState.LOADING


class LookupSession:
    """Owns the current lookup result for one consumer (a form, a terminal).

    *on_change* is called with every new snapshot, outside the lock.
    """

    def __init__(
        self,
        resolver: Optional[PostcodeResolver] = None,
        on_change: Optional[Callable[[SessionSnapshot], None]] = None,
    ):
        self._resolver = resolver
        self._on_change = on_change
        self._lock = threading.Lock()
        self._seq = 0
        self._snapshot = SessionSnapshot()

    @property
    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return self._snapshot

    def submit(self, query: str) -> SessionSnapshot:
        """Run one submission to completion and return the settled snapshot.

        Blank queries are ignored: no request, no transition.
        """
        if not normalise_postcode(query):
            return self.snapshot

        ticket = self._begin(query)
        try:
            result = lookup_postcode(query, self._resolver)
        except PostcodeNotFound as e:
            self._settle(ticket, LookupState.NOT_FOUND, message=e.message)
        except Offline as e:
            self._settle(ticket, LookupState.OFFLINE, message=e.message)
        except ConnectionFailed as e:
            self._settle(ticket, LookupState.CONNECTION_ERROR, message=e.message)
        except Exception:
            # Leave Loading before propagating
            self._settle(ticket, LookupState.CONNECTION_ERROR, message=ConnectionFailed.message)
            raise
        else:
            self._settle(ticket, LookupState.SUCCESS, result=result)
        return self.snapshot

    def reset(self) -> None:
        """Back to Idle; any in-flight submission becomes stale."""
        with self._lock:
            self._seq += 1
            self._snapshot = SessionSnapshot()
            snap = self._snapshot
        self._notify(snap)

    def _begin(self, query: str) -> int:
        with self._lock:
            self._seq += 1
            ticket = self._seq
            # Prior result and error are discarded on entering Loading
            self._snapshot = SessionSnapshot(state=LookupState.LOADING, query=query)
            snap = self._snapshot
        self._notify(snap)
        return ticket

    def _settle(self, ticket: int, state: LookupState, result=None, message=None) -> None:
        with self._lock:
            if ticket != self._seq:
                logger.debug("Dropping stale lookup #%d (current #%d)", ticket, self._seq)
                return
            self._snapshot = SessionSnapshot(
                state=state,
                query=self._snapshot.query,
                result=result,
                message=message,
            )
            snap = self._snapshot
        self._notify(snap)

    def _notify(self, snap: SessionSnapshot) -> None:
        if self._on_change is not None:
            self._on_change(snap)
