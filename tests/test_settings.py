import pytest

from batstat.collector import main, run
from batstat.collector.config.settings import Config, ConfigError, load_config


def test_defaults(tmp_path):
    config = load_config(["--log-dir", str(tmp_path)])

    assert config.log_dir == str(tmp_path)
    assert config.interval == 1
    assert config.daemon is False
    assert config.pidfile is None
    assert config.error_log is None
    assert config.log_level == "INFO"
    assert config.power_supply_dir == "/sys/class/power_supply"


def test_flags_override_environment_and_yaml(tmp_path, monkeypatch):
    config_file = tmp_path / "batstat.yaml"
    config_file.write_text(
        "log_dir: /from/yaml\ninterval: 30\npidfile: /run/yaml.pid\nlog_level: debug\n"
    )
    monkeypatch.setenv("BATSTAT_INTERVAL", "15")

    config = load_config(["-c", str(config_file), "--log-dir", "/from/flag"])

    assert config.log_dir == "/from/flag"
    assert config.interval == 15
    assert config.pidfile == "/run/yaml.pid"
    assert config.log_level == "DEBUG"

    config = load_config(["-c", str(config_file), "-i", "5", "-d"])
    assert config.log_dir == "/from/yaml"
    assert config.interval == 5
    assert config.daemon is True


def test_environment_config_path(tmp_path, monkeypatch):
    config_file = tmp_path / "batstat.yaml"
    config_file.write_text("log_dir: /from/yaml\ndaemon: true\n")
    monkeypatch.setenv("BATSTAT_CONFIG", str(config_file))
    monkeypatch.setenv("BATSTAT_DAEMON", "no")

    config = load_config([])

    assert config.log_dir == "/from/yaml"
    assert config.daemon is False


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(["-c", str(tmp_path / "absent.yaml")])


def test_bad_environment_interval(monkeypatch):
    monkeypatch.setenv("BATSTAT_INTERVAL", "soon")

    with pytest.raises(ConfigError):
        load_config([])


@pytest.mark.parametrize(
    "config",
    [
        Config(log_dir=None),
        Config(log_dir="/tmp", interval=0),
        Config(log_dir="/tmp", interval=-5),
        Config(log_dir="/tmp", interval="10"),
        Config(log_dir="/tmp", daemon=True),
    ],
)
def test_validate_rejects(config):
    with pytest.raises(ConfigError):
        config.validate()


def test_zero_interval_exits_before_discovery(log_dir, capsys):
    assert main(["--log-dir", str(log_dir), "--interval", "0"]) == 1

    assert list(log_dir.iterdir()) == []
    assert "Interval must be positive" in capsys.readouterr().err


def test_missing_log_dir_is_fatal(capsys):
    assert main([]) == 1
    assert "No log directory" in capsys.readouterr().err


def test_no_batteries_is_fatal(power_supply, log_dir):
    config = Config(log_dir=str(log_dir), power_supply_dir=str(power_supply))

    assert run(config) == 1
    assert list(log_dir.iterdir()) == []


def test_unreadable_class_directory_is_fatal(tmp_path, log_dir):
    config = Config(log_dir=str(log_dir), power_supply_dir=str(tmp_path / "nope"))

    assert run(config) == 1


def test_existing_pidfile_is_fatal_without_side_effects(power_supply, log_dir, tmp_path):
    from tests.conftest import write_battery

    write_battery(power_supply, "BAT0")
    pidfile = tmp_path / "batstatd.pid"
    pidfile.write_text("4242\n")
    config = Config(
        log_dir=str(log_dir),
        power_supply_dir=str(power_supply),
        daemon=True,
        pidfile=str(pidfile),
    )

    assert run(config) == 1

    assert pidfile.read_text() == "4242\n"
    assert list(log_dir.iterdir()) == []


def test_malformed_yaml_is_fatal(tmp_path, capsys):
    config_file = tmp_path / "batstat.yaml"
    config_file.write_text("log_dir: [unclosed\n")

    assert main(["-c", str(config_file)]) == 1
    assert "batstatd: Invalid config file" in capsys.readouterr().err


def test_non_mapping_yaml_is_fatal(tmp_path):
    config_file = tmp_path / "batstat.yaml"
    config_file.write_text("- just\n- a list\n")

    with pytest.raises(ConfigError):
        load_config(["-c", str(config_file)])


@pytest.mark.parametrize("value", ['"no"', '"false"', "'0'", "off", "false"])
def test_yaml_daemon_false_strings(tmp_path, value):
    config_file = tmp_path / "batstat.yaml"
    config_file.write_text(f"log_dir: /tmp\ndaemon: {value}\n")

    assert load_config(["-c", str(config_file)]).daemon is False


def test_yaml_daemon_true_string(tmp_path):
    config_file = tmp_path / "batstat.yaml"
    config_file.write_text('log_dir: /tmp\ndaemon: "yes"\n')

    assert load_config(["-c", str(config_file)]).daemon is True


def test_yaml_interval_string_is_coerced(tmp_path):
    config_file = tmp_path / "batstat.yaml"
    config_file.write_text('log_dir: /tmp\ninterval: "60"\n')

    config = load_config(["-c", str(config_file)])

    assert config.interval == 60
    config.validate()


def test_yaml_interval_not_a_number(tmp_path):
    config_file = tmp_path / "batstat.yaml"
    config_file.write_text("log_dir: /tmp\ninterval: soon\n")

    with pytest.raises(ConfigError, match="interval must be a whole number"):
        load_config(["-c", str(config_file)])
