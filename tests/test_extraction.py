from unittest.mock import MagicMock

import pytest
import requests

from favzone.core.models import BonusType
from favzone.extraction.client import ExtractionClient
from favzone.extraction.errors import ExtractionConfigError, ExtractionFailed, ExtractionRateLimited
from favzone.extraction.parsing import parse_manually, parse_reply


def pairs(raw):
    return [(r.game, r.type) for r in raw]

def test_parse_plain_json():
    text = '{"results": [{"game": 123, "type": "BB"}, {"game": 456, "type": "RB"}]}'
    assert pairs(parse_reply(text)) == [(123, BonusType.BB), (456, BonusType.RB)]

def test_parse_json_inside_prose():
    text = '解析結果です。\n{"results": [{"game": 88, "type": "RB"}]}\n以上'
    assert pairs(parse_reply(text)) == [(88, BonusType.RB)]

def test_parse_drops_malformed_items():
    text = '{"results": [{"game": "12", "type": "BB"}, {"game": 5, "type": "現在"}, {"game": 7.0, "type": "BB"}, {"game": true, "type": "RB"}, 3]}'
    assert pairs(parse_reply(text)) == [(7, BonusType.BB)]

def test_parse_rejects_non_finite_numbers():
    assert parse_reply('{"results": [{"game": Infinity, "type": "BB"}]}') == []
    assert pairs(parse_reply('{"results": [{"game": NaN, "type": "RB"}, {"game": 9, "type": "RB"}]}')) == [(9, BonusType.RB)]

def test_parse_wrong_shape_is_empty():
    assert parse_reply('{"items": []}') == []
    assert parse_reply('[1, 2]') == []
    assert parse_reply('') == []
    assert parse_reply(None) == []
    assert parse_reply('画像を読み取れませんでした') == []

def test_manual_fallback():
    assert pairs(parse_reply("120BB 45 rb 0BB")) == [(120, BonusType.BB), (45, BonusType.RB)]
    assert pairs(parse_manually("1回目 330G ... BB\n2回目 12G RB")) == [(1, BonusType.BB), (2, BonusType.RB)]


def response(status=200, body=None, text=""):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = status < 400
    resp.reason = "X"
    resp.text = text
    resp.json.return_value = body
    return resp

def make_client(*responses, api_key="k"):
    http = MagicMock()
    http.post.side_effect = list(responses)
    return ExtractionClient(api_key, "https://dify.example/v1/", session=http), http

def test_extract_uploads_then_asks():
    client, http = make_client(
        response(body={"id": "file-1"}),
        response(body={"answer": '{"results": [{"game": 200, "type": "BB"}]}'}),
    )
    assert pairs(client.extract(b"png", "h.png", "image/png")) == [(200, BonusType.BB)]

    upload, chat = http.post.call_args_list
    assert upload.args[0] == "https://dify.example/v1/files/upload"
    assert upload.kwargs["headers"]["Authorization"] == "Bearer k"
    assert upload.kwargs["files"]["file"] == ("h.png", b"png", "image/png")
    assert upload.kwargs["data"] == {"user": "pachislot-calculator"}
    assert chat.args[0] == "https://dify.example/v1/chat-messages"
    payload = chat.kwargs["json"]
    assert payload["response_mode"] == "blocking"
    assert payload["files"] == [{"type": "image", "transfer_method": "local_file", "upload_file_id": "file-1"}]

def test_extract_reads_fallback_reply_fields():
    client, _ = make_client(response(body={"id": "f"}), response(body={"message": "77 RB"}))
    assert pairs(client.extract(b"x")) == [(77, BonusType.RB)]

def test_extract_needs_api_key():
    client, http = make_client(api_key=None)
    with pytest.raises(ExtractionConfigError):
        client.extract(b"x")
    http.post.assert_not_called()

def test_rate_limit():
    client, _ = make_client(response(status=429))
    with pytest.raises(ExtractionRateLimited):
        client.extract(b"x")

def test_http_and_transport_errors():
    client, _ = make_client(response(status=500, text="boom"))
    with pytest.raises(ExtractionFailed):
        client.extract(b"x")
    client, _ = make_client(response(body={}))
    with pytest.raises(ExtractionFailed):
        client.extract(b"x")
    client, http = make_client()
    http.post.side_effect = requests.ConnectionError("down")
    with pytest.raises(ExtractionFailed):
        client.extract(b"x")
