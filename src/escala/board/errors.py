"""Error taxonomy for board operations.

Every error carries a stable machine code (the ``error`` field of API
responses), the HTTP status it maps to, and a human-readable detail.
"""


class BoardError(Exception):
    """Base class for failures surfaced to API clients."""

    code = "erro"
    status_code = 500

    def __init__(self, details: str) -> None:
        super().__init__(details)
        self.details = details

    def to_dict(self) -> dict:
        """Serialize to the shared ``{ok, error, details}`` response shape."""
        return {"ok": False, "error": self.code, "details": self.details}


# Policy violations


class LockedError(BoardError):
    code = "travado"
    status_code = 403

    def __init__(self, details: str = "edição bloqueada (sexta 10h até domingo)") -> None:
        super().__init__(details)


class DeniedError(BoardError):
    code = "negado"
    status_code = 403

    def __init__(self, details: str = "chave inválida") -> None:
        super().__init__(details)


# Input validation


class InvalidRequestError(BoardError):
    code = "requisicao_invalida"
    status_code = 400


class MissingFieldError(BoardError):
    """A required actor field (who changed, why) is blank."""

    code = "campo_obrigatorio"
    status_code = 400

    def __init__(self, field: str, details: str) -> None:
        super().__init__(details)
        self.field = field


class NoChangesError(BoardError):
    code = "sem_alteracoes"
    status_code = 400

    def __init__(self, details: str = "nenhuma alteração enviada") -> None:
        super().__init__(details)


class InvalidOfficerError(BoardError):
    code = "oficial_invalido"
    status_code = 400

    def __init__(self, officer_id: str) -> None:
        super().__init__(f"id inválido: {officer_id}")
        self.value = officer_id


class InvalidDateError(BoardError):
    code = "data_invalida"
    status_code = 400

    def __init__(self, date: str) -> None:
        super().__init__(f"data inválida: {date}")
        self.value = date


class InvalidCodeError(BoardError):
    code = "codigo_invalido"
    status_code = 400

    def __init__(self, code: str) -> None:
        super().__init__(f"código inválido: {code}")
        self.value = code


# Storage


class StoreReadError(BoardError):
    code = "falha_leitura"
    status_code = 500


class StoreWriteError(BoardError):
    code = "falha_gravacao"
    status_code = 500
