import os
from typing import Optional
from urllib.parse import quote

import requests
from loguru import logger

from errors import NotFoundError, TransportError, ValidationError

SURVEY_API_URL = os.getenv("SURVEY_API_URL", "http://127.0.0.1:8000/api")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))


class SurveyClient:
    """Cliente HTTP da API de pesquisas, usado pela sessão do formulário.

    Erros de rede e respostas não-2xx viram exceções do domínio:
    400 -> ValidationError, 404 -> NotFoundError, demais -> TransportError.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        self.base_url = (base_url or SURVEY_API_URL).rstrip("/")
        self.timeout = timeout or REQUEST_TIMEOUT
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, default_message: str, **kwargs) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"❌ Falha de rede em {method} {url}: {str(e)}")
            raise TransportError("Network error occurred", e)

        try:
            result = response.json()
        except ValueError as e:
            raise TransportError(default_message, e)
        if not isinstance(result, dict):
            raise TransportError(default_message, RuntimeError("unexpected response body"))

        if response.status_code >= 400:
            message = result.get("message") or default_message
            logger.warning(f"⚠️ {method} {url} -> {response.status_code}: {message}")
            if response.status_code == 404:
                raise NotFoundError(message, result.get("error"))
            if response.status_code == 400:
                raise ValidationError(message, result.get("error"))
            raise TransportError(message, RuntimeError(result.get("error") or f"HTTP {response.status_code}"))
        return result

    def _data(self, result: dict, default_message: str) -> dict:
        if result.get("data") is None:
            raise TransportError(default_message, RuntimeError("response without data"))
        return result["data"]

    def submit_survey(self, payload: dict) -> dict:
        """POST /surveys; devolve `data` ({id, submittedAt, companyName, redirectUrl})."""
        result = self._request("POST", "/surveys", "Failed to submit survey", json=payload)
        return self._data(result, "Failed to submit survey")

    def get_all_surveys(self, page: int = 1, limit: int = 10) -> dict:
        return self._request("GET", "/surveys", "Failed to fetch surveys",
                             params={"page": page, "limit": limit})

    def get_surveys_by_company(self, company_name: str, page: int = 1, limit: int = 10) -> dict:
        return self._request("GET", f"/surveys/company/{quote(company_name, safe='')}",
                             "Failed to fetch surveys", params={"page": page, "limit": limit})

    def get_survey_by_id(self, survey_id: int) -> dict:
        result = self._request("GET", f"/surveys/{survey_id}", "Failed to fetch survey")
        return self._data(result, "Failed to fetch survey")

    def get_company_analytics(self, company_name: str) -> dict:
        result = self._request("GET", f"/surveys/analytics/{quote(company_name, safe='')}",
                               "Failed to fetch analytics")
        return self._data(result, "Failed to fetch analytics")

    def get_questions(self) -> dict:
        return self._request("GET", "/surveys/questions", "Failed to fetch questions")
