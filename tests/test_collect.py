# This file is part of the rover project
#
# This copyrighted material is made available to anyone wishing to use,
# modify, copy, or redistribute it subject to the terms and conditions of
# version 2 of the GNU General Public License.
#
# See the LICENSE file in the source distribution for further information.

import logging

import pytest

from rover.collect import RoverCollect, discover_plugins
from rover.collect.context import ModuleContext, Platform
from rover.collect.plugins.consul import ConsulPlugin
from rover.collect.plugins.nomad import NomadPlugin
from rover.collect.plugins.vault import VaultPlugin
from tests.conftest import (EchoPlugin, FakeChecker, RecordingDumper,
                            records_at)


@pytest.fixture(autouse=True)
def no_log_source(monkeypatch):
    # an unknown platform skips the system log step
    monkeypatch.setattr("sys.platform", "plan9")


def run_collect(make_args, plugin_class=EchoPlugin, checker=None, **kwargs):
    component = RoverCollect(None, make_args(**kwargs), [], plugin_class,
                             checker=checker or FakeChecker(True))
    return component, component.execute()


class TestOrchestrator:

    def test_collects_fixed_commands(self, make_args, tmp_path, testhost,
                                     caplog):
        with caplog.at_level(logging.DEBUG):
            component, ret = run_collect(make_args)
        assert ret == 0
        outdir = tmp_path / "testhost" / "echo"
        assert sorted(p.name for p in outdir.iterdir()) == \
            ["echo_status.txt", "echo_version.txt"]
        assert (outdir / "echo_status.txt").read_bytes() == b"status ok\n"
        assert (outdir / "echo_version.txt").read_bytes() == b"v1\n"
        summary = [r.getMessage() for r in caplog.records
                   if r.name == "rover_ui"]
        assert "Executed Echo commands and stored output" in summary

    def test_greeting_names_module_and_host(self, make_args, testhost,
                                            caplog):
        with caplog.at_level(logging.DEBUG):
            run_collect(make_args)
        assert any("Hello from the rover Echo module on testhost" in
                   r.getMessage() for r in caplog.records)
        greetings = [r for r in caplog.records
                     if "Hello from the rover" in r.getMessage()]
        assert [r.name for r in greetings] == ["rover_ui"]
        assert greetings[0].levelno == logging.INFO

    def test_process_not_detected_runs_nothing(self, make_args, tmp_path,
                                               testhost, caplog):
        with caplog.at_level(logging.DEBUG):
            component, ret = run_collect(make_args,
                                         checker=FakeChecker(False))
        assert ret == 0
        outdir = tmp_path / "testhost" / "echo"
        assert outdir.is_dir()
        assert list(outdir.iterdir()) == []
        warnings = [r.getMessage()
                    for r in records_at(caplog, logging.WARNING)]
        assert warnings == ["[echo] No echo process detected in this "
                            "environment"]
        assert component.dumper.captured == []

    def test_presence_check_uses_process_name(self, make_args, testhost):
        checker = FakeChecker(False)
        run_collect(make_args, checker=checker)
        assert checker.asked == ["echo-service"]

    def test_rerun_overwrites_artifacts(self, make_args, tmp_path, testhost,
                                        monkeypatch):
        class EnvPlugin(EchoPlugin):
            commands = (
                ("echo_env", ("-c", "import os; "
                                    "print(os.environ['ROVER_TEST_RUN'])")),
            )

        monkeypatch.setenv("ROVER_TEST_RUN", "first run with more output")
        run_collect(make_args, plugin_class=EnvPlugin)
        monkeypatch.setenv("ROVER_TEST_RUN", "second")
        _, ret = run_collect(make_args, plugin_class=EnvPlugin)
        assert ret == 0
        outdir = tmp_path / "testhost" / "echo"
        assert [p.name for p in outdir.iterdir()] == ["echo_env.txt"]
        assert (outdir / "echo_env.txt").read_bytes() == b"second\n"

    def test_directory_failure_is_fatal(self, make_args, tmp_path,
                                        testhost):
        # a regular file blocks the host directory
        (tmp_path / "testhost").write_text("not a directory")
        checker = FakeChecker(True)
        component = RoverCollect(None, make_args(), [], EchoPlugin,
                                 checker=checker)
        with pytest.raises(SystemExit) as exc:
            component.execute()
        assert exc.value.code == 1
        assert component.dumper is None
        assert (tmp_path / "testhost").read_text() == "not a directory"

    def test_failed_commands_still_succeed(self, make_args, tmp_path,
                                           testhost, caplog):
        class BrokenPlugin(EchoPlugin):
            binary = "rover-no-such-binary-for-tests"

        with caplog.at_level(logging.DEBUG):
            component, ret = run_collect(make_args,
                                         plugin_class=BrokenPlugin)
        assert ret == 0
        assert list((tmp_path / "testhost" / "echo").iterdir()) == []
        assert len(records_at(caplog, logging.WARNING)) == 2
        assert component.dumper.summary() == (0, 2)

    def test_plugin_exception_does_not_abort(self, make_args, testhost,
                                             caplog):
        class ExplodingPlugin(EchoPlugin):
            def collect(self):
                raise RuntimeError("boom")

        with caplog.at_level(logging.DEBUG):
            _, ret = run_collect(make_args, plugin_class=ExplodingPlugin)
        assert ret == 0
        errors = records_at(caplog, logging.ERROR)
        assert any("boom" in r.getMessage() for r in errors)

    def test_cmd_timeout_reaches_dumper(self, make_args, testhost):
        component, _ = run_collect(make_args, cmd_timeout=7)
        assert component.dumper.timeout == 7


class TestAdvise:

    def test_missing_token_is_noted(self, make_args, testhost, caplog,
                                    monkeypatch):
        monkeypatch.delenv("ROVER_TEST_ECHO_TOKEN", raising=False)
        with caplog.at_level(logging.DEBUG):
            _, ret = run_collect(make_args, checker=FakeChecker(False))
        assert ret == 0
        infos = [r.getMessage() for r in records_at(caplog, logging.INFO)]
        assert ("[echo] No ROVER_TEST_ECHO_TOKEN value detected in this "
                "environment") in infos

    def test_present_token_is_silent(self, make_args, testhost, caplog,
                                     monkeypatch):
        monkeypatch.setenv("ROVER_TEST_ECHO_TOKEN", "s.secret")
        with caplog.at_level(logging.DEBUG):
            run_collect(make_args, checker=FakeChecker(False))
        assert not any("ROVER_TEST_ECHO_TOKEN" in r.getMessage()
                       for r in caplog.records)
        assert not any("s.secret" in r.getMessage() for r in caplog.records)


def make_plugin(plugin_class, platform, logger, detected=True):
    ctx = ModuleContext(host_name="testhost", platform=platform,
                        process_detected=detected)
    dumper = RecordingDumper()
    return plugin_class(context=ctx, dumper=dumper, logger=logger), dumper


class TestPluginCollect:

    def test_nomad_commands_then_syslog(self, logger, monkeypatch):
        monkeypatch.setattr("rover.collect.plugin.file_exists",
                            lambda path: path == "/var/log/syslog")
        plugin, dumper = make_plugin(NomadPlugin, Platform.LINUX, logger)
        plugin.collect()
        assert dumper.calls == [
            ("nomad", "nomad_status", "nomad", "status"),
            ("nomad", "nomad_version", "nomad", "version"),
            ("nomad", "nomad_syslog", "grep", "-w", "nomad",
             "/var/log/syslog"),
        ]

    def test_freebsd_falls_back_to_messages(self, logger, monkeypatch):
        monkeypatch.setattr("rover.collect.plugin.file_exists",
                            lambda path: False)
        plugin, dumper = make_plugin(VaultPlugin, Platform.FREEBSD, logger)
        plugin.collect_logs()
        assert dumper.calls == [
            ("vault", "vault_syslog", "grep", "-w", "vault",
             "/var/log/messages"),
        ]

    def test_darwin_system_log(self, logger):
        plugin, dumper = make_plugin(ConsulPlugin, Platform.DARWIN, logger)
        plugin.collect_logs()
        assert dumper.calls == [
            ("consul", "consul_syslog", "grep", "-w", "consul",
             "/var/log/system.log"),
        ]

    def test_unknown_platform_skips_logs(self, logger, caplog):
        plugin, dumper = make_plugin(NomadPlugin, Platform.OTHER, logger)
        with caplog.at_level(logging.DEBUG):
            plugin.collect()
        assert [c[1] for c in dumper.calls] == ["nomad_status",
                                                "nomad_version"]
        assert any("No known system log location" in r.getMessage()
                   for r in records_at(caplog, logging.INFO))

    def test_check_enabled_follows_presence(self, logger):
        plugin, _ = make_plugin(NomadPlugin, Platform.LINUX, logger,
                                detected=False)
        assert not plugin.check_enabled()

    @pytest.mark.parametrize("plugin_class", [NomadPlugin, ConsulPlugin,
                                              VaultPlugin])
    def test_artifact_names_are_unique(self, plugin_class):
        names = [artifact for artifact, _ in plugin_class.commands]
        names.append(f"{plugin_class.name()}_syslog")
        assert len(names) == len(set(names))
        assert all(n.startswith(plugin_class.name() + "_") for n in names)


class TestPluginMetadata:

    def test_discovery(self):
        assert [p.name() for p in discover_plugins()] == \
            ["consul", "nomad", "vault"]

    def test_nomad_texts(self):
        assert NomadPlugin.get_description() == \
            "Execute Nomad related commands and store output"
        assert NomadPlugin.help_text().startswith("Usage: rover nomad")
        assert NomadPlugin.get_process_name() == "nomad"
        assert NomadPlugin.token_env == "NOMAD_TOKEN"

    def test_default_name_from_class(self):
        class HashiRelease(EchoPlugin):
            plugin_name = None
        assert HashiRelease.name() == "hashi_release"
