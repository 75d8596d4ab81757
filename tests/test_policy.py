import importlib

from nuttgram_security.policy import DEFAULT_CHANNEL

ENV_VARS = ("NUTTGRAM_SECURITY_CHANNEL", "NUTTGRAM_SECURE_ON_START", "NUTTGRAM_AUDIT")


def reload_policy():
    policy_module = importlib.import_module("nuttgram_security.policy")
    return importlib.reload(policy_module)


def test_policy_defaults(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    policy = reload_policy().load_policy()

    assert policy.channel_name == DEFAULT_CHANNEL == "com.nuttgram.app/security"
    assert policy.secure_on_start is False
    assert policy.audit_enabled is False


def test_policy_env_overrides(monkeypatch):
    monkeypatch.setenv("NUTTGRAM_SECURITY_CHANNEL", "org.example/secure")
    monkeypatch.setenv("NUTTGRAM_SECURE_ON_START", "yes")
    monkeypatch.setenv("NUTTGRAM_AUDIT", "1")

    reloaded = reload_policy()
    try:
        policy = reloaded.policy
        assert policy.channel_name == "org.example/secure"
        assert policy.secure_on_start is True
        assert policy.audit_enabled is True
    finally:
        for name in ENV_VARS:
            monkeypatch.delenv(name, raising=False)
        reload_policy()


def test_policy_ignores_unparseable_values(monkeypatch):
    monkeypatch.setenv("NUTTGRAM_SECURITY_CHANNEL", "   ")
    monkeypatch.setenv("NUTTGRAM_SECURE_ON_START", "maybe")
    monkeypatch.setenv("NUTTGRAM_AUDIT", "")

    policy = reload_policy().load_policy()

    assert policy.channel_name == DEFAULT_CHANNEL
    assert policy.secure_on_start is False
    assert policy.audit_enabled is False
