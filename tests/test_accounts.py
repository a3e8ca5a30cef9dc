import pytest

from riuos_installer.lib import accounts


def _answers(monkeypatch, values):
    it = iter(values)
    monkeypatch.setattr(accounts.getpass, "getpass", lambda prompt="": next(it))


def test_prompt_new_password_retries_until_match(monkeypatch):
    _answers(monkeypatch, ["", "", "one", "two", "secret", "secret"])

    assert accounts.prompt_new_password("root", attempts=3) == "secret"


def test_prompt_new_password_gives_up(monkeypatch):
    _answers(monkeypatch, ["a", "b", "c", "d"])

    with pytest.raises(RuntimeError, match="after 2 attempts"):
        accounts.prompt_new_password("adam", attempts=2)


def test_set_password_uses_chpasswd_in_target(procs, make_ctx, monkeypatch):
    _answers(monkeypatch, ["secret", "secret"])
    ctx = make_ctx()

    accounts.set_password(ctx, "root")

    assert procs.argvs == [["chroot", ctx.cfg.target_root, "chpasswd"]]
    assert procs.calls[0].input == "root:secret\n"


def test_set_password_dry_run_does_not_prompt(procs, make_ctx, monkeypatch):
    monkeypatch.setattr(accounts.getpass, "getpass", lambda prompt="": pytest.fail("prompted"))

    accounts.set_password(make_ctx(dry_run=True), "root")

    assert procs.calls == []
