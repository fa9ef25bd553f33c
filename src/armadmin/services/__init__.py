"""Services for armadmin."""

from .access import AccessGuard, AccessResult, AccessState, ProfileLookup, next_state
from .forms import FormError
from .inflight import AlreadyInFlight, InFlightRegistry, Operation, ViewLifetime
from .media import MediaFile, MediaUploader, make_storage_key, resolve_media_url
from .workflow import FormResult, ProfileList, ResourceForm, ResourceList
from .workouts import WorkoutExercises, next_order

__all__ = [
    "AccessGuard",
    "AccessResult",
    "AccessState",
    "AlreadyInFlight",
    "FormError",
    "FormResult",
    "InFlightRegistry",
    "make_storage_key",
    "MediaFile",
    "MediaUploader",
    "next_order",
    "next_state",
    "Operation",
    "ProfileList",
    "ProfileLookup",
    "resolve_media_url",
    "ResourceForm",
    "ResourceList",
    "ViewLifetime",
    "WorkoutExercises",
]
