from pi_panel import create_app
import argparse


parser = argparse.ArgumentParser(prog="pi-panel", description="SBC (single board computer) panel")

parser.add_argument(
    "-b", "--bind",
    default=None,
    help="host:port the server binds to (default from configurations.json)"
)
parser.add_argument(
    "-m", "--mountBase",
    dest="mount_base",
    default=None,
    help="parent directory of mount points given as relative paths (default /mnt/)"
)
parser.add_argument(
    "--dev",
    action="store_true",
    help="development mode: log privileged commands instead of running them"
)


def split_bind(bind: str):
    """'0.0.0.0:8000' -> ('0.0.0.0', 8000)."""
    host, sep, port = bind.rpartition(":")
    if not sep or not host or not port.isdigit():
        raise ValueError(f"Can not bind to interface[{bind}], expected host:port")
    return host.strip("[]"), int(port)


def main(argv=None):
    args = parser.parse_args(argv)
    overrides = {"bind": args.bind} if args.bind else {}
    app = create_app(args.dev, mount_base=args.mount_base, overrides=overrides)
    host, port = split_bind(app.config["BIND"])
    app.run(host=host, port=port, threaded=True)


if __name__ == "__main__":
    main()
