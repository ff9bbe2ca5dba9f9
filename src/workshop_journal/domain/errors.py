"""Error kinds, their user-facing messages, and the exceptions that carry them."""

from enum import StrEnum

from workshop_journal.domain.records import EntityKind


class ErrorKind(StrEnum):
    """Every failure the journal reports to a user."""

    INVALID_DATA = "invalid_data"
    CHILD_NOT_FOUND = "child_not_found"
    WORKSHOP_NOT_FOUND = "workshop_not_found"
    SESSION_NOT_FOUND = "session_not_found"
    OBSERVATION_NOT_FOUND = "observation_not_found"
    RECORDING_NOT_FOUND = "recording_not_found"
    MOMENT_NOT_FOUND = "moment_not_found"
    NO_FILE = "no_file"
    INVALID_FILE_TYPE = "invalid_file_type"
    FILE_TOO_LARGE = "file_too_large"
    UPLOAD_FAILED = "upload_failed"
    PERMISSION_DENIED = "permission_denied"
    DEVICE_NOT_FOUND = "device_not_found"
    DEVICE_BUSY = "device_busy"
    DEVICE_ERROR = "device_error"
    CAPTURE_START_FAILED = "capture_start_failed"
    NOT_RECORDING = "not_recording"
    CAPTURE_BUSY = "capture_busy"
    NOTHING_TO_UPLOAD = "nothing_to_upload"
    INTERNAL = "internal"


MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.INVALID_DATA: "Ongeldige gegevens",
    ErrorKind.CHILD_NOT_FOUND: "Kind niet gevonden",
    ErrorKind.WORKSHOP_NOT_FOUND: "Workshop niet gevonden",
    ErrorKind.SESSION_NOT_FOUND: "Sessie niet gevonden",
    ErrorKind.OBSERVATION_NOT_FOUND: "Observatie niet gevonden",
    ErrorKind.RECORDING_NOT_FOUND: "Opname niet gevonden",
    ErrorKind.MOMENT_NOT_FOUND: "Gemarkeerd moment niet gevonden",
    ErrorKind.NO_FILE: "Geen bestand ontvangen",
    ErrorKind.INVALID_FILE_TYPE: "Ongeldig bestandstype",
    ErrorKind.FILE_TOO_LARGE: "Bestand is te groot",
    ErrorKind.UPLOAD_FAILED: (
        "Er is een fout opgetreden bij het opslaan van de opname"
    ),
    ErrorKind.PERMISSION_DENIED: (
        "Geen toegang tot camera of microfoon. Controleer de machtigingen."
    ),
    ErrorKind.DEVICE_NOT_FOUND: "Geen camera of microfoon gevonden.",
    ErrorKind.DEVICE_BUSY: (
        "De camera of microfoon is al in gebruik door een andere toepassing."
    ),
    ErrorKind.DEVICE_ERROR: "De camera of microfoon kon niet worden gestart.",
    ErrorKind.CAPTURE_START_FAILED: (
        "Er is een fout opgetreden bij het starten van de opname"
    ),
    ErrorKind.NOT_RECORDING: "Er loopt geen opname",
    ErrorKind.CAPTURE_BUSY: "Er loopt al een opname",
    ErrorKind.NOTHING_TO_UPLOAD: "Er is geen opname om op te slaan",
    ErrorKind.INTERNAL: "Interne serverfout",
}

NOT_FOUND_KINDS: dict[EntityKind, ErrorKind] = {
    EntityKind.CHILD: ErrorKind.CHILD_NOT_FOUND,
    EntityKind.WORKSHOP: ErrorKind.WORKSHOP_NOT_FOUND,
    EntityKind.SESSION: ErrorKind.SESSION_NOT_FOUND,
    EntityKind.OBSERVATION: ErrorKind.OBSERVATION_NOT_FOUND,
    EntityKind.RECORDING: ErrorKind.RECORDING_NOT_FOUND,
    EntityKind.TAGGED_MOMENT: ErrorKind.MOMENT_NOT_FOUND,
}


def message_for(kind: ErrorKind) -> str:
    """Return the user-facing message for an error kind."""
    return MESSAGES[kind]


class JournalError(Exception):
    """Base error carrying an error kind."""

    def __init__(self, kind: ErrorKind) -> None:
        super().__init__(message_for(kind))
        self.kind = kind

    @property
    def message(self) -> str:
        return message_for(self.kind)


class RecordNotFoundError(JournalError):
    """Raised when an id does not name an existing record."""

    def __init__(self, entity: EntityKind, record_id: int) -> None:
        super().__init__(NOT_FOUND_KINDS[entity])
        self.entity = entity
        self.record_id = record_id


class UploadRejectedError(JournalError):
    """Raised when an uploaded media part is refused."""


class MediaAccessError(JournalError):
    """Raised when camera or microphone access fails."""


class CaptureError(JournalError):
    """Raised when a capture action is not possible in the current state."""


class UploadFailedError(JournalError):
    """Raised when a finished capture could not be uploaded."""

    def __init__(self) -> None:
        super().__init__(ErrorKind.UPLOAD_FAILED)
