import asyncio

import aiosqlite
import pytest

from kyi.database import (
    get_db, insert_vocabulary, insert_grammar_point, insert_kaiwa_scenario, list_content,
)


def _seed(db_path):
    async def _go():
        db = await get_db()
        try:
            ids = {}
            ids["taberu"] = await insert_vocabulary(db, "食べる", "たべる", "စားသည်", "to eat", "N3", "verb")
            ids["keiken"] = await insert_vocabulary(db, "経験", "けいけん", "အတွေ့အကြုံ", "experience", "N3", "noun",
                                                    "いい経験です。", "ကောင်းတဲ့ အတွေ့အကြုံပါ။")
            ids["miru"] = await insert_vocabulary(db, "見る", "みる", "ကြည့်သည်", "to see", "N3", "verb")
            ids["aimai"] = await insert_vocabulary(db, "曖昧", "あいまい", "မရေရာသော", "vague", "N2", "adjective")
            ids["youni"] = await insert_grammar_point(
                db, "〜ようにする", "to make an effort to", "ကြိုးစားသည်", "Making an effort.", "N3",
                [{"japanese": "毎日走るようにしています。", "burmese": "နေ့တိုင်း ပြေးဖို့ ကြိုးစားပါတယ်။",
                  "english": "I try to run every day."}],
            )
            ids["broken"] = await insert_grammar_point(
                db, "〜ばかり", "only", "", "", "N3", [{"japanese": "missing the rest"}],
            )
            ids["restaurant"] = await insert_kaiwa_scenario(
                db, "レストラン", "စားသောက်ဆိုင်", "N3", "Ordering lunch",
                [{"speaker": "店員", "japanese": "いらっしゃいませ", "burmese": "ကြိုဆိုပါတယ်", "english": "Welcome"}],
                [{"japanese": "お願いします", "burmese": "ပေးပါ", "english": "Please"}],
            )
            await db.commit()
            return ids
        finally:
            await db.close()
    return asyncio.run(_go())


@pytest.fixture
def content(db_path):
    return _seed(db_path)


def test_vocabulary_filtered_by_level_newest_first(client, content):
    body = client.get("/api/vocabulary", params={"level": "N3"}).json()
    assert [i["japanese"] for i in body["items"]] == ["見る", "経験", "食べる"]
    assert body["categories"] == ["verb", "noun"]
    assert body["levels"] == ["N3", "N2", "N1"]
    assert body["empty_message"] is None


def test_vocabulary_category_filter(client, content):
    body = client.get("/api/vocabulary", params={"level": "N3", "category": "noun"}).json()
    assert [i["english"] for i in body["items"]] == ["experience"]
    assert body["items"][0]["example_sentence"] == "いい経験です。"
    assert body["categories"] == ["noun"]


def test_empty_level_shows_empty_message(client, content):
    body = client.get("/api/vocabulary", params={"level": "N1"}).json()
    assert body["items"] == []
    assert body["empty_message"] == "No vocabulary items found."


def test_unknown_level_rejected(client, content):
    assert client.get("/api/vocabulary", params={"level": "N9"}).status_code == 400
    assert client.get("/api/grammar", params={"level": "A1"}).status_code == 400


def test_grammar_examples_are_typed_and_malformed_rows_skipped(client, content):
    body = client.get("/api/grammar", params={"level": "N3"}).json()
    assert [g["pattern"] for g in body["grammar_points"]] == ["〜ようにする"]
    example = body["grammar_points"][0]["examples"][0]
    assert set(example) == {"japanese", "burmese", "english"}


def test_kaiwa_list_and_detail(client, content):
    body = client.get("/api/kaiwa").json()
    assert [s["title"] for s in body["scenarios"]] == ["レストラン"]

    detail = client.get(f"/api/kaiwa/{content['restaurant']}").json()
    assert detail["dialogue"][0]["speaker"] == "店員"
    assert detail["key_phrases"][0]["english"] == "Please"
    assert client.get("/api/kaiwa/nope").status_code == 404


def test_query_failure_reads_as_empty(client, content, monkeypatch):
    async def broken(*args, **kwargs):
        raise aiosqlite.OperationalError("no such table")
    monkeypatch.setattr("kyi.services.content.list_content", broken)

    body = client.get("/api/kaiwa").json()
    assert body["scenarios"] == []
    assert body["empty_message"] == "No conversation scenarios found."


def test_logged_out_browsing_does_not_record(client, content):
    assert client.get("/api/vocabulary").status_code == 200
    resp = client.post(f"/api/vocabulary/{content['taberu']}/studied")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "recorded": False}


def test_logged_in_study_shows_on_dashboard(client, content):
    client.post("/api/signup", json={"email": "kyi@example.com", "password": "secret1", "name": "Kyi"})
    assert client.post(f"/api/vocabulary/{content['taberu']}/studied").json()["recorded"] is True
    client.post(f"/api/vocabulary/{content['taberu']}/studied")
    client.post(f"/api/grammar/{content['youni']}/studied")
    client.post(f"/api/kaiwa/{content['restaurant']}/studied")

    body = client.get("/api/dashboard").json()
    assert body["profile"] == {"name": "Kyi", "current_level": "N3"}
    assert body["stats"] == {"vocabulary": 1, "grammar": 1, "kaiwa": 1, "totalReviews": 4}


def test_dashboard_requires_login(client):
    assert client.get("/api/dashboard").status_code == 401


def test_list_content_rejects_unknown_columns(db_path):
    async def _go():
        db = await get_db()
        try:
            with pytest.raises(ValueError):
                await list_content(db, "grammar_points", {"category": "noun"})
            with pytest.raises(ValueError):
                await list_content(db, "users")
            return await list_content(db, "vocabulary", {"level": "N3"}, descending=False, limit=1)
        finally:
            await db.close()
    assert asyncio.run(_go()) == []
