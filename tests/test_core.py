"""
核心管理器测试

覆盖重新加载、保存、启用/禁用以及玩家追踪的完整流程。
"""

import ipaddress

import pytest

from pingplus import PingPlusCore
from pingplus.cache.controller import ReconcileAction
from pingplus.config.sections import SectionId, DEFAULT_PLAYER_TRACKING_POLICY, default_plugin_conf
from pingplus.utils.exceptions import LoadError, UnregisteredSectionError


TRACKING_ON = """
    Plugin:
      player_tracking: true
    Core:
      caches:
        player_tracking: {policy}
"""

TRACKING_OFF = """
    Plugin:
      player_tracking: false
"""


class TestInitialization:
    """初始化与配置访问"""

    def test_get_conf_before_reload(self, core):
        core.register_conf(SectionId.PLUGIN, default_plugin_conf(), "Plugin")
        assert core.get_conf(SectionId.PLUGIN) == default_plugin_conf()

    def test_unregistered_section(self, core):
        with pytest.raises(UnregisteredSectionError):
            core.get_conf(SectionId.CORE)

    def test_initialize_with_defaults(self, core):
        core.initialize()
        assert core.store.config_file.exists()
        assert core.is_tracking()
        assert core.tracking.policy_text == DEFAULT_PLAYER_TRACKING_POLICY
        assert core.last_reconcile is ReconcileAction.CREATED
        assert core.is_enabled()

    def test_context_manager_releases_cache(self, tmp_path):
        with PingPlusCore(tmp_path) as core:
            cache = core.tracking.cache
            core.add_client("Alice", "10.0.0.1")
        assert not core.is_tracking()
        assert cache.retired


class TestTracking:
    """客户端追踪"""

    def test_add_and_resolve(self, core):
        core.initialize()
        core.add_client("Alice", ipaddress.ip_address("10.0.0.1"))

        assert core.resolve_client(ipaddress.ip_address("10.0.0.1")) == "Alice"
        assert core.resolve_client("10.0.0.1") == "Alice"
        assert core.resolve_client(ipaddress.ip_address("10.0.0.2")) is None

    def test_ipv6_address(self, core):
        core.initialize()
        core.add_client("Alice", ipaddress.ip_address("2001:db8::1"))
        assert core.resolve_client("2001:db8::1") == "Alice"

    @pytest.mark.parametrize("client", [("10.0.0.1", 25565), b"10.0.0.1", None])
    def test_unsupported_address_type(self, core, client):
        core.initialize()
        with pytest.raises(TypeError):
            core.add_client("Alice", client)
        with pytest.raises(TypeError):
            core.resolve_client(client)

    def test_metrics(self, core):
        core.initialize()
        assert core.get_metrics() == {"clients_added": 0, "clients_resolved": 0, "clients_unresolved": 0}

        core.add_client("Alice", "10.0.0.1")
        core.add_client("Bob", "10.0.0.2")
        core.resolve_client("10.0.0.1")
        core.resolve_client("10.0.0.3")

        assert core.get_metrics() == {"clients_added": 2, "clients_resolved": 1, "clients_unresolved": 1}
        assert core.reset_metrics() == {"clients_added": 2, "clients_resolved": 1, "clients_unresolved": 1}
        assert core.get_metrics() == {"clients_added": 0, "clients_resolved": 0, "clients_unresolved": 0}

    def test_identical_override_creates_one_cache(self, core, write_config):
        write_config(TRACKING_ON.format(policy=DEFAULT_PLAYER_TRACKING_POLICY))
        core.initialize()
        assert core.last_reconcile is ReconcileAction.CREATED
        cache = core.tracking.cache
        core.add_client("Alice", "10.0.0.1")

        core.reload()
        assert core.last_reconcile is ReconcileAction.NONE
        assert core.tracking.cache is cache
        assert core.resolve_client("10.0.0.1") == "Alice"

    def test_policy_change_discards_entries(self, core, write_config):
        write_config(TRACKING_ON.format(policy="maximumSize=100"))
        core.initialize()
        core.add_client("Alice", "10.0.0.1")

        write_config(TRACKING_ON.format(policy="maximumSize=200"))
        core.reload()

        assert core.last_reconcile is ReconcileAction.REBUILT
        assert core.tracking.policy_text == "maximumSize=200"
        assert core.resolve_client("10.0.0.1") is None

    def test_malformed_policy_falls_back(self, core, write_config):
        write_config(TRACKING_ON.format(policy="maximumSize=huge"))
        core.initialize()

        assert core.is_tracking()
        assert core.tracking.policy_text == DEFAULT_PLAYER_TRACKING_POLICY
        cache = core.tracking.cache

        core.reload()
        assert core.last_reconcile is ReconcileAction.NONE
        assert core.tracking.cache is cache

    def test_disable_tracking(self, core, write_config):
        core.initialize()
        core.add_client("Alice", "10.0.0.1")

        write_config(TRACKING_OFF)
        core.reload()

        assert core.last_reconcile is ReconcileAction.DELETED
        assert not core.is_tracking()
        assert core.resolve_client("10.0.0.1") is None
        core.add_client("Bob", "10.0.0.2")
        assert core.resolve_client("10.0.0.2") is None

    def test_load_error_keeps_cache(self, core, write_config):
        core.initialize()
        cache = core.tracking.cache
        core.add_client("Alice", "10.0.0.1")

        write_config("Core: [broken\n")
        with pytest.raises(LoadError):
            core.reload()

        assert core.tracking.cache is cache
        assert core.resolve_client("10.0.0.1") == "Alice"


class TestAdminCommands:
    """管理命令"""

    def test_reload_command(self, core, write_config):
        core.initialize()
        write_config(TRACKING_OFF)
        assert core.run_admin_command("RELOAD", sender="Notch") is True
        assert not core.is_tracking()

    def test_reload_command_failure_reported(self, core, write_config):
        core.initialize()
        write_config("- not\n- a mapping\n")
        assert core.run_admin_command("reload") is False
        assert core.is_tracking()

    def test_reload_command_undecodable_file(self, core):
        core.initialize()
        core.add_client("Alice", "10.0.0.1")
        core.store.config_file.write_bytes(b"Plugin:\n  player_tracking: \xff\n")

        assert core.run_admin_command("reload") is False
        assert core.resolve_client("10.0.0.1") == "Alice"

    def test_reload_command_undecodable_profiles(self, core, tmp_path):
        core.initialize()
        (tmp_path / "Profiles.yml").write_bytes(b"Enabled: \xff\n")
        assert core.run_admin_command("reload") is False

    def test_save_command(self, core):
        core.initialize()
        core.store.config_file.unlink()
        assert core.run_admin_command("save") is True
        assert core.store.config_file.exists()

    def test_enable_disable(self, core, tmp_path):
        core.initialize()
        assert core.run_admin_command("disable") is True
        assert not core.is_enabled()
        assert "Enabled: false" in (tmp_path / "Profiles.yml").read_text(encoding='utf-8')

        other = PingPlusCore(tmp_path).initialize()
        assert not other.is_enabled()
        other.close()

        assert core.enable() is True
        assert core.is_enabled()

    def test_enable_failure_reported(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("file", encoding='utf-8')
        core = PingPlusCore(tmp_path, profiles_file="blocker/Profiles.yml").initialize()

        assert core.disable() is False
        assert core.is_enabled()
        core.close()

    def test_unknown_command(self, core):
        with pytest.raises(ValueError):
            core.run_admin_command("explode")


class TestStatus:
    """状态文本个性化"""

    def test_personalized_description(self, core):
        core.initialize()
        assert core.status.get_description("10.0.0.1") == ("A Minecraft Server", "Hello, player!")

        core.add_client("Alice", "10.0.0.1")
        assert core.status.get_description("10.0.0.1") == ("Welcome back, Alice!",)
        assert core.status.get_player_hover("10.0.0.1") is None

    def test_status_follows_reload(self, core, write_config):
        write_config("""
            Status:
              default:
                description:
                - Hi %player%
            Plugin:
              player_tracking: false
              unknown_player_name: stranger
        """)
        core.initialize()
        core.add_client("Alice", "10.0.0.1")

        assert core.status.get_description("10.0.0.1") == ("Hi stranger",)
