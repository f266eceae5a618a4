"""Data loading, normalization, and in-memory query engine."""
from .loader import FileFetcher, HttpFetcher, LoadError, SourceNames, fetch_collections, make_fetcher
from .store import DataStore, aggregate_counts
from .schemas import (
    Event, User, Registration, RegistrationType, IndividualRegistration, GroupRegistration,
    RegistrationDetails, Stats, EventFilter,
)
from .normalize import (
    unwrap, normalize_event, normalize_user, normalize_registration,
    normalize_events, normalize_users, normalize_registrations,
)
