from pathlib import Path

from cairn.origin_env import ModuleMapItem, OriginEnv


def test_default_env_uses_current_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    env = OriginEnv.default_env()
    assert env.config_file == Path.cwd()
    assert env.working_dir == Path.cwd()


def test_default_env_has_no_settings(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    env = OriginEnv.default_env()
    assert env.settings_hash == 0
    assert env.includes == []
    assert env.options == []
    assert env.maps == []


def test_default_envs_are_independent(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    first = OriginEnv.default_env()
    second = OriginEnv.default_env()
    first.includes.append(Path("inc"))
    assert second.includes == []
    assert first != second


def test_module_map_item_equality():
    a = ModuleMapItem("lib", [Path("a")])
    b = ModuleMapItem("lib", [Path("a")])
    assert a == b
    assert ModuleMapItem("lib").paths == []