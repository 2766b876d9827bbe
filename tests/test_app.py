import subprocess
import sys


def test_app_help_runs():
    proc = subprocess.run(
        [sys.executable, "-m", "station_queue.app", "-h"],
        capture_output=True,
        text=True,
        check=False,
    )
    assert proc.returncode == 0
    out = proc.stdout + proc.stderr
    assert "main entrypoint" in out
    assert "serve" in out
    assert "take" in out
    assert "export" in out


def test_serve_help_runs():
    proc = subprocess.run(
        [sys.executable, "-m", "station_queue.app", "serve", "-h"],
        capture_output=True,
        text=True,
        check=False,
    )
    assert proc.returncode == 0
    out = proc.stdout + proc.stderr
    assert "--max-queue-length" in out
    assert "--stations" in out
    assert "--data-file" in out


def test_client_reports_unreachable_broker():
    proc = subprocess.run(
        [sys.executable, "-m", "station_queue.app", "take", "Charging", "--mqtt-port", "1"],
        capture_output=True,
        text=True,
        check=False,
        timeout=30,
    )
    assert proc.returncode == 2
    assert "cannot reach MQTT broker" in proc.stderr
    assert "Traceback" not in proc.stderr
