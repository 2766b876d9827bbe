from __future__ import annotations

# Single-entrypoint runner.
#
#     python -m station_queue.app serve [--stations Charging,Releasing] [--data-file queue_data.json]
#     python -m station_queue.app take Charging
#     python -m station_queue.app call Charging
#     python -m station_queue.app display
#
# `serve` runs the engine; every other subcommand is a one-shot client that
# sends a single request to a running engine over MQTT.

import argparse
import sys

from .mqtt_topics import DEFAULT_NAMESPACE


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Station Queue System (MQTT) - main entrypoint")
    sub = parser.add_subparsers(dest="cmd", required=True)

    def add_mqtt_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--mqtt-host", default="127.0.0.1")
        p.add_argument("--mqtt-port", type=int, default=1883)
        p.add_argument("--namespace", default=DEFAULT_NAMESPACE)

    p_serve = sub.add_parser("serve", help="Run the queue engine")
    add_mqtt_args(p_serve)
    p_serve.add_argument("--data-file", default=None)
    p_serve.add_argument("--average-service-time", type=float, default=None, help="minutes per ticket")
    p_serve.add_argument("--max-queue-length", type=int, default=None)
    p_serve.add_argument("--stations", default=None, help="comma separated station names")

    p_status = sub.add_parser("status", help="Show current and waiting tickets per station")
    add_mqtt_args(p_status)

    for name, help_text in (
        ("take", "Take a ticket for a station"),
        ("call", "Call the next ticket at a station"),
        ("recall", "Call the last served ticket again"),
    ):
        p = sub.add_parser(name, help=help_text)
        add_mqtt_args(p)
        p.add_argument("service", help="station name, e.g. Charging")

    p_announce = sub.add_parser("announce", help="Set the announcement shown on displays")
    add_mqtt_args(p_announce)
    p_announce.add_argument("text", nargs="?", default="")

    p_ann = sub.add_parser("announcement", help="Show the current announcement")
    add_mqtt_args(p_ann)

    p_reset = sub.add_parser("reset", help="Clear every queue and counter")
    add_mqtt_args(p_reset)

    p_export = sub.add_parser("export", help="Export waiting tickets as CSV")
    add_mqtt_args(p_export)
    p_export.add_argument("--output", "-o", default="-", help="file path, '-' for stdout")

    p_stats = sub.add_parser("stats", help="Show served totals")
    add_mqtt_args(p_stats)

    p_display = sub.add_parser("display", help="Print broadcasts as they arrive")
    add_mqtt_args(p_display)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.cmd == "serve":
        from .service import main as run

        run_args = ["--mqtt-host", args.mqtt_host, "--mqtt-port", str(args.mqtt_port), "--namespace", args.namespace]
        if args.data_file is not None:
            run_args += ["--data-file", args.data_file]
        if args.average_service_time is not None:
            run_args += ["--average-service-time", str(args.average_service_time)]
        if args.max_queue_length is not None:
            run_args += ["--max-queue-length", str(args.max_queue_length)]
        if args.stations is not None:
            run_args += ["--stations", args.stations]
        _dispatch_to_module_main(run, run_args)
        return 0

    if args.cmd == "display":
        from .display import run_display

        run_display(mqtt_host=args.mqtt_host, mqtt_port=args.mqtt_port, namespace=args.namespace)
        return 0

    return _run_client_command(args)


def _run_client_command(args: argparse.Namespace) -> int:
    from .client import EngineClient, EngineRequestError

    try:
        with EngineClient(
            mqtt_host=args.mqtt_host, mqtt_port=args.mqtt_port, namespace=args.namespace, name=args.cmd
        ) as client:
            return _client_command(client, args)
    except EngineRequestError as e:
        print(f"[{args.cmd}] error ({e.error.code}): {e.error.message}", file=sys.stderr)
        return 1
    except TimeoutError as e:
        print(f"[{args.cmd}] {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(
            f"[{args.cmd}] cannot reach MQTT broker at {args.mqtt_host}:{args.mqtt_port}: {e}",
            file=sys.stderr,
        )
        return 2


def _client_command(client, args: argparse.Namespace) -> int:
    if args.cmd == "status":
        for station, st in client.status().items():
            waiting = ", ".join(st["waiting"]) or "-"
            print(
                f"{station}: serving {st['current'] or '-'} | waiting {waiting} "
                f"| est. wait {st['estimated_wait']} min"
            )
        return 0

    if args.cmd == "take":
        print(f"[take] your number is {client.take_ticket(args.service)}")
        return 0

    if args.cmd == "call":
        current = client.call_next(args.service)
        if current is None:
            print(f"[call] no one waiting at {args.service}")
        else:
            print(f"[call] now serving {current} at {args.service}")
        return 0

    if args.cmd == "recall":
        print(f"[recall] now serving {client.recall(args.service)} at {args.service}")
        return 0

    if args.cmd == "announce":
        client.set_announcement(args.text)
        print("[announce] announcement updated")
        return 0

    if args.cmd == "announcement":
        print(client.get_announcement())
        return 0

    if args.cmd == "reset":
        print(f"[reset] {client.reset()}")
        return 0

    if args.cmd == "export":
        from .export import write_waiting_csv

        rows = client.export()
        if args.output == "-":
            write_waiting_csv(rows, sys.stdout)
        else:
            with open(args.output, "w", newline="", encoding="utf-8") as fh:
                count = write_waiting_csv(rows, fh)
            print(f"[export] wrote {count} rows to {args.output}")
        return 0

    if args.cmd == "stats":
        stats = client.stats()
        print(f"served: {stats['total_served']}, accumulated wait estimate: {stats['total_wait_time']} min")
        return 0

    raise ValueError(f"unknown command: {args.cmd}")


def _dispatch_to_module_main(module_main, argv: list[str]) -> None:
    old_argv = sys.argv[:]
    try:
        sys.argv = [old_argv[0], *argv]
        module_main()
    finally:
        sys.argv = old_argv


if __name__ == "__main__":
    sys.exit(main())
