from __future__ import annotations

import argparse
import logging
import math
import sys

from scpgrasp.errors import SolutionCheckError
from scpgrasp.io_dataset import INSTANCE_FORMATS
from scpgrasp.utils import format_pct, parse_csv_list, time_seed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="GRASP + local search for the Set Covering Problem")
    parser.add_argument("--verbose-log", action="store_true", help="Log library progress at INFO level")
    sub = parser.add_subparsers(dest="command", required=True)

    p_run = sub.add_parser("run", help="Run GRASP trials on one instance")
    p_run.add_argument("file", help="Instance file (.gz is decompressed, - reads stdin)")
    p_run.add_argument("--config", default=None, help="YAML configuration file")
    p_run.add_argument("-a", "--alpha", type=float, default=None, help="RCL threshold parameter (in [0,1])")
    p_run.add_argument("-n", "--runs", type=int, default=None, help="Number of tries")
    p_run.add_argument("-r", "--random", type=int, default=None, help="Random seed")
    p_run.add_argument("-e", "--epsilon", type=float, default=None, help="Tolerance")
    p_run.add_argument("-f", "--format", choices=list(INSTANCE_FORMATS), default=None,
                       help="Instance file format")
    p_run.add_argument("-q", "--quiet", action="store_true", help="Don't produce any verbose output")
    p_run.add_argument("--moves", default=None, help="Comma separated, e.g. drop,swap_1_1,swap_2_1")
    p_run.add_argument("--no-baseline", dest="baseline", action="store_false",
                       help="Skip the ILP optimum; gaps are relative to the best cost found")
    p_run.set_defaults(baseline=None)
    p_run.add_argument("--output-root", default=None)
    p_run.add_argument("--save", dest="save", action="store_true")
    p_run.add_argument("--no-save", dest="save", action="store_false")
    p_run.set_defaults(save=None)
    p_run.add_argument("--with-plots", dest="with_plots", action="store_true")
    p_run.add_argument("--no-plots", dest="with_plots", action="store_false")
    p_run.set_defaults(with_plots=None)

    p_gen = sub.add_parser("gen", help="Generate a random instance in scp format")
    p_gen.add_argument("--requirements", type=int, required=True)
    p_gen.add_argument("--items", type=int, required=True)
    p_gen.add_argument("--density", type=float, default=0.05)
    p_gen.add_argument("--seed", type=int, default=2026)
    p_gen.add_argument("--cost-min", type=int, default=1)
    p_gen.add_argument("--cost-max", type=int, default=100)
    p_gen.add_argument("--output", required=True)

    p_plot = sub.add_parser("plot", help="Redraw figures from a saved experiment")
    p_plot.add_argument("--experiment-dir", required=True)

    return parser


def _run_overrides(args: argparse.Namespace) -> dict[str, object]:
    overrides: dict[str, object] = {}
    if args.format is not None:
        overrides["instance.format"] = args.format
    if args.alpha is not None:
        overrides["grasp.alpha"] = args.alpha
    if args.epsilon is not None:
        overrides["grasp.epsilon"] = args.epsilon
    if args.runs is not None:
        overrides["grasp.runs"] = args.runs
    if args.random is not None:
        overrides["grasp.seed"] = args.random
    if args.moves is not None:
        overrides["local_search.moves"] = parse_csv_list(args.moves, lower=True)
    if args.baseline is not None:
        overrides["baseline.enabled"] = bool(args.baseline)
    if args.output_root is not None:
        overrides["output.root"] = args.output_root
    if args.save is not None:
        overrides["output.save_results"] = bool(args.save)
    if args.with_plots is not None:
        overrides["output.generate_plots"] = bool(args.with_plots)
        if args.with_plots:
            overrides["output.save_results"] = True
    return overrides


def cmd_run(args: argparse.Namespace) -> int:
    from scpgrasp.config import load_config
    from scpgrasp.runner import run_experiment

    overrides = _run_overrides(args)
    verbose = not args.quiet

    try:
        cfg = load_config(args.config, overrides)
    except (ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    # Resolve a time-based seed before the banner prints it.
    if cfg["grasp"]["seed"] is None:
        overrides["grasp.seed"] = cfg["grasp"]["seed"] = time_seed()

    if verbose:
        print(f"format  = {cfg['instance']['format']}")
        print(f"alpha   = {cfg['grasp']['alpha']}")
        print(f"n       = {cfg['grasp']['runs']}")
        print(f"random  = {cfg['grasp']['seed']}")
        print(f"epsilon = {cfg['grasp']['epsilon']}")
        print(f"moves   = {','.join(cfg['local_search']['moves'])}")

    def on_model(model, baseline, reference) -> None:
        if not verbose:
            return
        print(f"Number of elements: {model.n_items}")
        print(f"Number of sets: {model.n_requirements}")
        if baseline is not None and baseline.is_feasible:
            status = baseline.meta.get("solver_status")
            if reference is None:
                print(f"[*] ILP: {baseline.objective:g} ({status}, upper bound only, not proven optimal)")
            else:
                print(f"[*] ILP: {baseline.objective:g} ({status})")
        elif baseline is not None:
            print(f"[*] ILP: no solution ({baseline.meta.get('solver_status')})")
        if reference is None:
            print("No ILP optimum: per-trial gap = n/a, summary gaps are relative to the best cost found")

    def on_trial(row: dict) -> None:
        if not verbose:
            return
        gap = row["gap"]
        gap_text = format_pct(gap) if not math.isnan(gap) else "n/a"
        print(f"[{row['run_idx']}] GRASP: {row['grasp_cost']:g} | GRASP+LS: {row['ls_cost']:g} | gap = {gap_text}")

    try:
        report = run_experiment(
            args.file,
            config_path=args.config,
            overrides=overrides,
            on_trial=on_trial,
            on_model=on_model,
        )
    except (ValueError, SolutionCheckError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    s = report.summary
    if verbose:
        if report.reference is None:
            print(f"Best cost found: {s['ls_cost_best']:g}")
        print(f"Gap: min = {format_pct(s['gap_min'])} | avg = {format_pct(s['gap_avg'])} | max = {format_pct(s['gap_max'])}")
        print(f"Time: avg = {s['time_avg_ms']:.3f} ms")
        if report.run_dir is not None:
            print(f"Results: {report.run_dir}")
    else:
        print(f"{100.0 * s['gap_min']:g} {100.0 * s['gap_avg']:g} {100.0 * s['gap_max']:g} {s['time_avg_ms']:g}")
    return 0


def cmd_gen(args: argparse.Namespace) -> int:
    from scpgrasp.generator import generate_instance
    from scpgrasp.io_dataset import write_instance_file

    model = generate_instance(
        n_requirements=args.requirements,
        n_items=args.items,
        density=args.density,
        seed=args.seed,
        cost_range=(args.cost_min, args.cost_max),
    )
    path = write_instance_file(args.output, model)
    print(f"Instance written: {path} ({model.n_requirements} requirements, {model.n_items} items)")
    return 0


def cmd_plot(args: argparse.Namespace) -> int:
    from scpgrasp.visualize import plot_from_experiment_dir

    paths = plot_from_experiment_dir(args.experiment_dir)
    print("Figures:")
    for path in paths:
        print(path)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose_log else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "run":
        return cmd_run(args)
    if args.command == "gen":
        return cmd_gen(args)
    if args.command == "plot":
        return cmd_plot(args)
    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
