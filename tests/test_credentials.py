"""
Tests for studio/campaign/credentials.py — the optimistic credential gate.
"""

import pytest

from studio.campaign.credentials import CredentialGate, EnvCredentialProvider


class TestCredentialGate:

    @pytest.mark.asyncio
    async def test_probe_sets_state(self, provider):
        provider.available = False
        gate = CredentialGate(provider, initial=True)
        assert await gate.probe() is False
        assert gate.has_credential() is False

    def test_has_credential_is_stable(self, provider):
        gate = CredentialGate(provider, initial=True)
        assert [gate.has_credential() for _ in range(5)] == [True] * 5
        assert provider.probe_calls == 0

    @pytest.mark.asyncio
    async def test_ensure_selects_then_trusts(self, provider):
        provider.available = False
        gate = CredentialGate(provider, initial=False)

        await gate.ensure_credential()

        assert provider.select_calls == 1
        assert provider.probe_calls == 0
        assert gate.has_credential() is True

    @pytest.mark.asyncio
    async def test_ensure_is_idempotent(self, provider):
        gate = CredentialGate(provider, initial=False)
        await gate.ensure_credential()
        await gate.ensure_credential()
        assert provider.select_calls == 1

    @pytest.mark.asyncio
    async def test_ensure_never_raises(self, provider):
        provider.select_error = RuntimeError("host dialog unavailable")
        gate = CredentialGate(provider, initial=False)

        await gate.ensure_credential()

        assert gate.has_credential() is True

    def test_invalidate(self, provider):
        gate = CredentialGate(provider, initial=True)
        gate.invalidate()
        assert gate.has_credential() is False
        gate.invalidate()
        assert gate.has_credential() is False


class TestEnvCredentialProvider:

    @pytest.mark.asyncio
    async def test_probe_reads_environment(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "")
        monkeypatch.setenv("GOOGLE_API_KEY", "")
        provider = EnvCredentialProvider()
        assert await provider.probe() is False

        monkeypatch.setenv("GOOGLE_API_KEY", "fallback-key")
        assert await provider.probe() is True

    @pytest.mark.asyncio
    async def test_select_reloads_dotenv(self, monkeypatch, tmp_path):
        monkeypatch.setenv("GEMINI_API_KEY", "")
        monkeypatch.setenv("GOOGLE_API_KEY", "")
        env_file = tmp_path / ".env"
        env_file.write_text("GEMINI_API_KEY=from-dotenv\n")
        provider = EnvCredentialProvider(env_file)

        assert await provider.probe() is False
        await provider.select()
        assert await provider.probe() is True
