from typing import Optional


class SurveyError(Exception):
    """Erro base do domínio da pesquisa."""
    status_code = 500

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error


class ValidationError(SurveyError):
    # Dados do respondente fora das regras (totais, pontos iguais, campos obrigatórios)
    status_code = 400


class MalformedRequestError(SurveyError):
    # Corpo ou parâmetros da requisição fora do schema (JSON inválido, campos ausentes)
    status_code = 400


class NotFoundError(SurveyError):
    # Nenhum registro para o id/empresa informados
    status_code = 404


class TransportError(SurveyError):
    """Rede ou banco indisponível. A mensagem original fica em `error`."""
    status_code = 500

    def __init__(self, message: str, original: Optional[BaseException] = None):
        super().__init__(message, str(original) if original is not None else None)
        self.original = original
