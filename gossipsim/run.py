import argparse, logging
from .config import ConfigError, LATENCY_PRESETS, SimConfig
from .sim_core import Sim


def build_parser():
    ap = argparse.ArgumentParser(description="Gossip propagation simulator")
    # scale/time
    ap.add_argument("--nodes", type=int, default=20)
    ap.add_argument("--peers", type=int, default=8)
    ap.add_argument("--stop_time", type=float, default=60.0)
    ap.add_argument("--drain_margin", type=float, default=20.0)
    # latency
    ap.add_argument("--latency", choices=sorted(LATENCY_PRESETS), default="heavy")
    # mining
    ap.add_argument("--mining_interval_min", type=float, default=10.0)
    ap.add_argument("--mining_interval_max", type=float, default=14.0)
    ap.add_argument("--startup_jitter", type=float, default=10.0)
    ap.add_argument("--label", type=str, default="Block")
    ap.add_argument("--key_mode", choices=["seq", "time"], default="seq")
    ap.add_argument("--single_sender", action="store_true", default=False,
                    help="Only node 0 mines, a single message")
    # transport
    ap.add_argument("--transport", choices=["direct", "session"], default="direct")
    ap.add_argument("--linger", type=float, default=30.0)
    ap.add_argument("--connect_failure_rate", type=float, default=0.0)
    # misc
    ap.add_argument("--seed", type=int, default=42, help="-1 draws a seed from system entropy")
    ap.add_argument("--outdir", type=str, default=None)
    ap.add_argument("--verbose", action="store_true", default=False,
                    help="Also list each node's neighbors and received messages")
    ap.add_argument("--log_level", type=str, default="WARNING",
                    choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return ap


def main(argv=None):
    ap = build_parser()
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='[%(levelname)s] %(asctime)s - %(message)s'
    )

    cfg = SimConfig(
        nodes=args.nodes, peers=args.peers, stop_time=args.stop_time, drain_margin=args.drain_margin,
        mining_interval_min=args.mining_interval_min, mining_interval_max=args.mining_interval_max,
        startup_jitter=args.startup_jitter, label=args.label, key_mode=args.key_mode,
        single_sender=args.single_sender,
        transport=args.transport, linger=args.linger, connect_failure_rate=args.connect_failure_rate,
        seed=None if args.seed < 0 else args.seed, outdir=args.outdir
    )
    try:
        cfg.apply_latency(args.latency)
        sim = Sim(cfg)
    except ConfigError as e:
        ap.error(str(e))

    sim.run()
    print(sim.report(verbose=args.verbose))
    if cfg.outdir:
        print(f"\nDone. See {cfg.outdir}/summary.json and {cfg.outdir}/messages.csv.")
    return sim.metrics

if __name__ == "__main__":
    main()
