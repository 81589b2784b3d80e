"""
Tests for the command-line interface.
"""

import json

import pytest

from jobhelper import __version__
from jobhelper import app
from jobhelper.cache import VerificationCache
from jobhelper.database import SqliteStore
from jobhelper.models import VerificationSignal
from jobhelper.storage import JsonFileStore
from conftest import FakeSearch


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "store.json"


def run(capsys, *argv):
    app.main(list(argv))
    return capsys.readouterr().out


def write_listing(tmp_path, **fields):
    path = tmp_path / "listing.json"
    path.write_text(json.dumps(fields), encoding="utf-8")
    return str(path)


class TestBasics:

    def test_version(self, capsys):
        assert run(capsys, "--version").strip() == __version__

    def test_no_command_prints_help(self, capsys):
        app.main([])
        assert "usage: jobhelper" in capsys.readouterr().err


class TestKeywordsCommand:

    def test_list_defaults(self, capsys, store_path):
        out = run(capsys, "keywords", "list", "--store", str(store_path))
        assert out.splitlines() == ["[off] Confidential", "[off] Hiring"]

    def test_add_toggle_remove(self, capsys, store_path):
        store = str(store_path)
        assert "Added keyword: Staffing" in run(capsys, "keywords", "add", "Staffing", "--store", store)
        assert "already exists" in run(capsys, "keywords", "add", "Staffing", "--store", store)
        assert "Toggled keyword: Staffing" in run(capsys, "keywords", "toggle", "Staffing", "--store", store)

        out = run(capsys, "keywords", "list", "--store", store)
        assert "[on] Staffing" in out

        assert "Removed keyword: Staffing" in run(capsys, "keywords", "remove", "Staffing", "--store", store)
        assert "No such keyword: Staffing" in run(capsys, "keywords", "remove", "Staffing", "--store", store)

    def test_priority_list(self, capsys, store_path):
        store = str(store_path)
        assert "No priority keywords." in run(capsys, "keywords", "list", "--priority", "--store", store)
        run(capsys, "keywords", "add", "Remote", "--priority", "--store", store)
        assert run(capsys, "keywords", "list", "--priority", "--store", store).strip() == "[on] Remote"

    def test_missing_text(self, store_path):
        with pytest.raises(SystemExit) as exc_info:
            app.main(["keywords", "add", "--store", str(store_path)])
        assert "Provide the keyword text" in str(exc_info.value.code)


class TestSettingsCommand:

    def test_show(self, capsys, store_path):
        shown = json.loads(run(capsys, "settings", "show", "--store", str(store_path)))
        assert shown["verificationEnabled"] is True
        assert shown["minHourlyRate"] == 0.0

    def test_set_values(self, capsys, store_path):
        store = str(store_path)
        run(capsys, "settings", "set", "min-rate", "32.5", "--store", store)
        run(capsys, "settings", "set", "easy-apply", "on", "--store", store)
        run(capsys, "settings", "set", "disallowed-terms", "unpaid, volunteer", "--store", store)

        shown = json.loads(run(capsys, "settings", "show", "--store", store))
        assert shown["minHourlyRate"] == 32.5
        assert shown["easyApplyEnabled"] is True
        assert shown["disallowedTerms"] == ["unpaid", "volunteer"]

    def test_invalid_value(self, store_path):
        with pytest.raises(SystemExit) as exc_info:
            app.main(["settings", "set", "min-rate", "-5", "--store", str(store_path)])
        assert "Invalid value for min-rate" in str(exc_info.value.code)

    def test_set_requires_value(self, store_path):
        with pytest.raises(SystemExit):
            app.main(["settings", "set", "min-rate", "--store", str(store_path)])

    def test_sqlite_store(self, capsys, tmp_path):
        db = tmp_path / "store.db"
        run(capsys, "settings", "set", "hide-unverified", "true", "--db", str(db))
        assert SqliteStore(db).get("hideUnverified") is True


class TestScoreCommand:

    def test_kept_listing(self, capsys, tmp_path, store_path):
        store = str(store_path)
        run(capsys, "keywords", "add", "Remote", "--priority", "--store", store)
        listing = write_listing(tmp_path, title="Python Dev", company="Acme", listing_text="Remote, $60/hr")

        result = json.loads(run(capsys, "score", "--input", listing, "--store", store))

        assert result == {
            "filtered": False,
            "reason": None,
            "priority_score": 100,
            "matched_keywords": ["Remote"],
        }

    def test_blocked_company(self, capsys, tmp_path, store_path):
        store = str(store_path)
        run(capsys, "keywords", "toggle", "Hiring", "--store", store)
        listing = write_listing(tmp_path, title="Dev", company="Hiring Co", listing_text="$60/hr")

        result = json.loads(run(capsys, "score", "--input", listing, "--store", store))

        assert result["filtered"] is True
        assert result["reason"] == "Matched: Hiring"
        assert result["priority_score"] is None

    def test_invalid_listing(self, capsys, tmp_path, store_path):
        listing = write_listing(tmp_path, company="Acme")
        with pytest.raises(SystemExit) as exc_info:
            app.main(["score", "--input", listing, "--store", str(store_path)])
        assert exc_info.value.code == 2
        assert "Missing required field: title" in capsys.readouterr().out

    def test_missing_input(self, tmp_path, store_path):
        with pytest.raises(SystemExit) as exc_info:
            app.main(["score", "--input", str(tmp_path / "nope.json"), "--store", str(store_path)])
        assert "Input file not found" in str(exc_info.value.code)


class TestExtractCommand:

    def test_prints_signal(self, capsys, tmp_path):
        page = tmp_path / "results.html"
        page.write_text(
            '<a class="result__a" href="https://acme.example/">Acme</a>'
            '<a class="result__a" href="https://twitter.com/acme">Acme on X</a>',
            encoding="utf-8",
        )

        signal = json.loads(run(capsys, "extract", "--input", str(page)))

        assert signal["website"] == "https://acme.example"
        assert signal["social"] == ["https://twitter.com/acme"]
        assert signal["verified"] is True
        assert signal["timestamp"] is None


class TestCacheCommand:

    def test_empty(self, capsys, store_path):
        assert "Verification cache is empty." in run(capsys, "cache", "list", "--store", str(store_path))

    def test_lists_entries(self, capsys, store_path):
        VerificationCache(JsonFileStore(store_path)).put(
            "Acme", VerificationSignal(website="https://acme.example", timestamp=7)
        )
        out = run(capsys, "cache", "list", "--store", str(store_path))
        assert "Found 1 cached employers" in out
        assert "Employer: Acme" in out
        assert "Website: https://acme.example" in out


class TestVerifyCommand:

    @pytest.fixture
    def fake_search(self, monkeypatch):
        search = FakeSearch(pages={
            "Acme": '<a class="result__a" href="https://acme.example">Acme</a>',
        })
        monkeypatch.setattr(app, "DuckDuckGoSearch", lambda **kwargs: search)
        return search

    def test_verify_and_cache(self, capsys, store_path, fake_search):
        out = run(capsys, "verify", "Acme", "--store", str(store_path))
        assert "[verified] Acme (search)" in out
        assert "Website: https://acme.example" in out

        # Second run is served from the persisted cache.
        out = run(capsys, "verify", "Acme", "--store", str(store_path))
        assert "[verified] Acme (cache)" in out
        assert fake_search.calls == ["Acme"]

    def test_unverified(self, capsys, store_path, fake_search):
        out = run(capsys, "verify", "Nobody Inc", "--store", str(store_path))
        assert "[unverified] Nobody Inc (search)" in out
        assert "verified=0 unverified=1 failed=0" in out

    def test_hide_unverified(self, capsys, store_path, fake_search):
        run(capsys, "settings", "set", "hide-unverified", "yes", "--store", str(store_path))
        out = run(capsys, "verify", "Nobody Inc", "--store", str(store_path))
        assert "[unverified]" not in out
        assert "verified=0 unverified=1 failed=0" in out

    def test_disabled(self, capsys, store_path, fake_search):
        run(capsys, "settings", "set", "verification", "off", "--store", str(store_path))
        with pytest.raises(SystemExit) as exc_info:
            app.main(["verify", "Acme", "--store", str(store_path)])
        assert "Verification is disabled" in str(exc_info.value.code)
        assert fake_search.calls == []
