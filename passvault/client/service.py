import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Union

from pydantic import TypeAdapter, ValidationError

from passvault.client.config import get_settings
from passvault.client.database import CredentialStore
from passvault.client.state import SessionState
from passvault.core.errors import AuthFailed, NotFound, ValidationFailed, WeakPassword
from passvault.core.generator import generate_password
from passvault.core.models import CredentialRecord, ExportEntry, ImportEntry, ImportOutcome, SearchScope, UserRecord
from passvault.core.strength import StrengthReport, evaluate

logger = logging.getLogger(__name__)

_export_adapter = TypeAdapter(List[ExportEntry])


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err["loc"]) or "entry"
        parts.append(f"{field}: {err['msg']}")
    return "; ".join(parts)


class VaultService:
    """Registration, login, profile and vault operations for the UI layer.

    Every method returns plain pydantic models or builtins. Storage faults
    from the store propagate unchanged as ``StorageError``.
    """

    def __init__(self, store: CredentialStore):
        self.store = store
        self.settings = get_settings()

    # --- Accounts ---
    def register(self, username: str, password: str, hint: str = "") -> UserRecord:
        failed = []
        if not username or not username.strip():
            failed.append("username")
        failed.extend(evaluate(password).failed)
        if failed:
            raise ValidationFailed("Registration requirements not met", failed)

        user_id = self.store.create_user(username, password, hint)
        return UserRecord(id=user_id, username=username, password=password, password_hint=hint)

    def login(self, username: str, password: str) -> UserRecord:
        user = self.store.authenticate(username, password)
        if user is None:
            logger.info("Failed login attempt")
            raise AuthFailed()
        return user

    def open_session(self, username: str, password: str) -> SessionState:
        return SessionState(self.login(username, password))

    def password_hint(self, username: str) -> Optional[str]:
        user = self.store.get_user(username)
        return user.password_hint if user else None

    def change_profile(self, user_id: int, new_hint: str, new_password: str) -> UserRecord:
        report = evaluate(new_password)
        if not report.is_strong:
            raise WeakPassword(str(report.category), report.failed)
        self.store.update_user_profile(user_id, new_hint, new_password)
        return self.store.get_user_by_id(user_id)

    def delete_profile(self, user_id: int) -> None:
        self.store.delete_user(user_id)

    # --- Strength / generator ---
    def check_strength(self, candidate: str) -> StrengthReport:
        return evaluate(candidate)

    def suggest_password(self, length: Optional[int] = None) -> str:
        return generate_password(self.settings.GENERATOR_DEFAULT_LENGTH if length is None else length)

    # --- Credentials ---
    def add_credential(self, user_id: int, site: str, username: str, secret: str) -> int:
        self._check_site(site)
        return self.store.add_credential(user_id, site, username, secret)

    def edit_credential(self, credential_id: int, site: str, username: str, secret: str) -> None:
        self._check_site(site)
        self.store.update_credential(credential_id, site, username, secret)

    def delete_credential(self, credential_id: int) -> None:
        self.store.delete_credential(credential_id)

    def list_credentials(self, user_id: int) -> List[CredentialRecord]:
        return self.store.list_credentials(user_id)

    def search_credentials(self, user_id: int, query: str, scope: SearchScope = SearchScope.ALL) -> List[CredentialRecord]:
        return self.store.search_credentials(user_id, query, scope)

    @staticmethod
    def _check_site(site: str):
        if not site or not site.strip():
            raise ValidationFailed("Site must not be empty", ["site"])

    # --- Import / export ---
    def export_credentials(self, user_id: int) -> List[ExportEntry]:
        return [
            ExportEntry(site=c.site, username=c.username, password=c.secret)
            for c in self.store.list_credentials(user_id)
        ]

    def dump_export(self, entries: List[ExportEntry]) -> str:
        return _export_adapter.dump_json(entries, indent=self.settings.EXPORT_INDENT).decode("utf-8")

    def import_credentials(self, user_id: int, document: Union[str, bytes, List[Any]]) -> List[ImportOutcome]:
        if isinstance(document, (str, bytes)):
            try:
                document = json.loads(document)
            except ValueError as exc:
                raise ValidationFailed(f"Import document is not valid JSON: {exc}", ["document"]) from exc
        if not isinstance(document, list):
            raise ValidationFailed("Import document must be a JSON array", ["document"])
        if self.store.get_user_by_id(user_id) is None:
            raise NotFound(f"User {user_id} not found")

        outcomes = []
        for index, raw in enumerate(document):
            try:
                entry = ImportEntry.model_validate(raw)
            except ValidationError as exc:
                outcomes.append(ImportOutcome(index=index, ok=False, error=_describe(exc)))
                continue
            credential_id = self.store.add_credential(user_id, entry.site, entry.username, entry.password)
            outcomes.append(ImportOutcome(index=index, ok=True, credential_id=credential_id))

        imported = sum(1 for o in outcomes if o.ok)
        logger.info("Imported %d of %d entries for user id=%s", imported, len(outcomes), user_id)
        return outcomes

    def export_to_file(self, user_id: int, path: Union[str, Path]) -> int:
        entries = self.export_credentials(user_id)
        Path(path).write_text(self.dump_export(entries), encoding="utf-8")
        logger.info("Exported %d entries to %s", len(entries), path)
        return len(entries)

    def import_from_file(self, user_id: int, path: Union[str, Path]) -> List[ImportOutcome]:
        return self.import_credentials(user_id, Path(path).read_bytes())
