import requests
import structlog

from favzone.config import Settings, settings
from favzone.core.models import RawRecord
from favzone.extraction.errors import ExtractionConfigError, ExtractionFailed, ExtractionRateLimited
from favzone.extraction.parsing import parse_reply

log = structlog.get_logger(__name__)

PROMPT = """
画像からパチスロの履歴データを解析してください。
各行のゲーム数とボーナス種別（BBまたはRB）を抽出してください。
ヘッダーやサマリーは無視して、ゲーム結果の行のみを対象にしてください。

必ず以下の形式のJSONのみで回答してください：
{
  "results": [
    {"game": ゲーム数, "type": "BB"},
    {"game": ゲーム数, "type": "RB"}
  ]
}

説明や追加テキストは不要です。JSONのみ返してください。
"""


class ExtractionClient:
    """Two-step client: upload the image, then ask about it in a chat message."""

    def __init__(self, api_key: str | None, base_url: str, user: str = "pachislot-calculator",
                 timeout: float = 60.0, session: requests.Session | None = None):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.user = user
        self.timeout = timeout
        self.http = session or requests.Session()

    @classmethod
    def from_settings(cls, s: Settings = settings) -> "ExtractionClient":
        return cls(s.dify_api_key, s.dify_base_url, user=s.dify_user, timeout=s.dify_timeout)

    def _post(self, path: str, **kwargs) -> dict:
        url = f"{self.base_url}{path}"
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            resp = self.http.post(url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            log.warning("extraction_request_error", path=path, error=str(e))
            raise ExtractionFailed(f"request to {path} failed: {e}") from e
        if resp.status_code == 429:
            log.warning("extraction_rate_limited", path=path)
            raise ExtractionRateLimited("API rate limit exceeded. Please wait and try again.")
        if not resp.ok:
            log.warning("extraction_http_error", path=path, status=resp.status_code, body=resp.text[:200])
            raise ExtractionFailed(f"{path} failed: {resp.status_code} {resp.reason}")
        try:
            body = resp.json()
        except ValueError as e:
            raise ExtractionFailed(f"{path} returned non-JSON body") from e
        if not isinstance(body, dict):
            raise ExtractionFailed(f"{path} returned unexpected body")
        return body

    def upload(self, data: bytes, filename: str, content_type: str) -> str:
        body = self._post("/files/upload", files={"file": (filename, data, content_type)}, data={"user": self.user})
        file_id = body.get("id")
        if not file_id:
            raise ExtractionFailed("upload response has no file id")
        return file_id

    def ask(self, file_id: str) -> str:
        payload = {
            "inputs": {},
            "query": PROMPT,
            "response_mode": "blocking",
            "conversation_id": "",
            "user": self.user,
            "files": [{"type": "image", "transfer_method": "local_file", "upload_file_id": file_id}],
        }
        body = self._post("/chat-messages", json=payload)
        return body.get("answer") or body.get("data") or body.get("message") or ""

    def extract(self, data: bytes, filename: str = "image.png", content_type: str = "image/png") -> list[RawRecord]:
        if not self.api_key:
            raise ExtractionConfigError("DIFY_API_KEY is not set")
        file_id = self.upload(data, filename, content_type)
        log.debug("extraction_uploaded", file_id=file_id, size=len(data))
        text = self.ask(file_id)
        results = parse_reply(text if isinstance(text, str) else "")
        log.info("extraction_parsed", count=len(results))
        return results
