"""Tests for the CLI commands."""

import io

import pytest
from unittest.mock import patch
from rich.console import Console

from consulio.catalog.client import RegistryUnreachable
from consulio.cli import build_parser, main


@pytest.fixture
def output():
    """Swap the commands console for one writing to a buffer."""
    buffer = io.StringIO()
    with patch("consulio.catalog.commands.console", Console(file=buffer, width=200)):
        yield buffer


@pytest.fixture
def isolated(monkeypatch, tmp_path):
    """Keep real guacamole.properties and CONSUL_IO_* variables out of the way."""
    for name in ("CONSUL_IO_HOSTNAME", "CONSUL_IO_PORT", "CONSUL_IO_TOKEN"):
        monkeypatch.delenv(name, raising=False)
    return ["--properties", str(tmp_path / "guacamole.properties")]


def _run(argv):
    args = build_parser().parse_args(argv)
    return args.func(args)


class TestConnectionsCommand:
    """Tests for `consulio connections`."""

    @patch("consulio.provider.CatalogClient")
    def test_lists_connections(self, mock_client_class, output, isolated, fake_catalog, instance):
        mock_client_class.return_value = fake_catalog({
            "rdp1": [instance("rdp1", "10.0.0.5", 3389, {"protocol": "rdp", "security": "nla"})],
            "broken": [instance("broken", address="")],
        })

        assert _run(isolated + ["connections", "--user", "alice"]) == 0

        text = output.getvalue()
        assert "rdp1" in text
        assert "10.0.0.5" in text
        assert "security=nla" in text
        assert "broken" not in text
        assert "Total: 1 connection(s)" in text

    @patch("consulio.provider.CatalogClient")
    def test_no_connections(self, mock_client_class, output, isolated, fake_catalog):
        mock_client_class.return_value = fake_catalog({"web": []})

        assert _run(isolated + ["connections"]) == 0
        assert "No services tagged 'guacamole' found." in output.getvalue()

    @patch("consulio.provider.CatalogClient")
    def test_unreachable_registry(self, mock_client_class, output, isolated, fake_catalog):
        mock_client_class.return_value = fake_catalog({}, fail_names=RegistryUnreachable("refused"))

        assert _run(isolated + ["connections"]) == 2
        assert "Unable to connect to Consul.IO service." in output.getvalue()

    @patch("consulio.provider.CatalogClient")
    def test_overrides_reach_the_client(self, mock_client_class, output, isolated, fake_catalog):
        mock_client_class.return_value = fake_catalog({})

        _run(isolated + ["--hostname", "consul.internal", "--port", "8501", "--token", "t", "connections"])

        settings = mock_client_class.call_args[0][0]
        assert (settings.hostname, settings.port, settings.token) == ("consul.internal", 8501, "t")

    def test_bad_port_property(self, output, monkeypatch, isolated):
        monkeypatch.setenv("CONSUL_IO_PORT", "not-a-port")
        assert _run(isolated + ["connections"]) == 1
        assert "Configuration error" in output.getvalue()

    def test_unreadable_properties_file(self, output, tmp_path):
        """Test a properties path that is a directory exits with a configuration error."""
        assert _run(["--properties", str(tmp_path), "connections"]) == 1
        assert "Configuration error" in output.getvalue()


class TestShowCommand:
    """Tests for `consulio show`."""

    @patch("consulio.provider.CatalogClient")
    def test_show(self, mock_client_class, output, isolated, fake_catalog, instance):
        mock_client_class.return_value = fake_catalog({
            "ssh1": [instance("ssh1", "10.0.0.8", 22, {"protocol": "ssh", "username": "ops"})],
        })

        assert _run(isolated + ["show", "ssh1"]) == 0

        text = output.getvalue()
        assert "Protocol: ssh" in text
        assert "username: ops" in text
        assert "hostname: 10.0.0.8" in text

    @patch("consulio.provider.CatalogClient")
    def test_show_missing(self, mock_client_class, output, isolated, fake_catalog):
        mock_client_class.return_value = fake_catalog({})

        assert _run(isolated + ["show", "nope"]) == 1
        assert "No connection named 'nope'." in output.getvalue()


class TestServicesCommand:
    """Tests for `consulio services`."""

    @patch("consulio.catalog.commands.CatalogClient")
    def test_services(self, mock_client_class, output, isolated, fake_catalog):
        mock_client_class.return_value = fake_catalog({"web": [], "rdp1": []})

        assert _run(isolated + ["services"]) == 0

        text = output.getvalue()
        assert "rdp1" in text
        assert "web" in text
        assert "Total: 2 service(s)" in text

    @patch("consulio.catalog.commands.CatalogClient")
    def test_services_unreachable(self, mock_client_class, output, isolated, fake_catalog):
        mock_client_class.return_value = fake_catalog({}, fail_names=RegistryUnreachable("refused"))

        assert _run(isolated + ["services"]) == 2
        assert "refused" in output.getvalue()


class TestMain:
    """Tests for the entry point."""

    @patch("consulio.cli._setup_logging")
    def test_no_subcommand(self, mock_logging, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 2
        mock_logging.assert_called_once_with(False)

    @patch("consulio.cli._setup_logging")
    @patch("consulio.catalog.commands.CatalogClient")
    def test_exit_code(self, mock_client_class, mock_logging, output, isolated, fake_catalog):
        mock_client_class.return_value = fake_catalog({"rdp1": []})

        with pytest.raises(SystemExit) as excinfo:
            main(isolated + ["-v", "services"])

        assert excinfo.value.code == 0
        mock_logging.assert_called_once_with(True)
