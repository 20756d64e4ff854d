# cluster_sizer/cli.py
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from . import presets
from .config import SizerSettings, configure_logging, load_settings
from .model.entities import ClusterCapacityEstimate, ClusterTopology, InstanceType, Workload
from .model.resources import ResourceVector
from .sim.capacity import estimate
from .sim.packing import fit, headroom, satisfies
from .sim.result import Infeasible
from .sim.sizing import POLICIES, get_policy, size_for
from .topology.io import (
    estimate_to_dict,
    fit_to_dict,
    infeasible_to_dict,
    load_instance_type_from_file,
    load_topology_from_file,
    topology_to_dict,
    workload_to_dict,
)
from .types import GI_B

log = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_INFEASIBLE = 2


# ---------------------------
# Text output
# ---------------------------


def _gib(n: float) -> str:
    return f"{n / GI_B:,.2f} GiB"


def _fmt_resources(r: ResourceVector) -> str:
    parts = [f"memory {_gib(r.memory)}", f"cpus {r.cpus:g}"]
    parts.extend(f"{d} {r[d]:g}" for d in r.dimensions if d not in ("memory", "cpus"))
    return ", ".join(parts)


def explain_cluster(t: ClusterTopology) -> str:
    p = [
        f"Cluster: {t.description or '-'}",
        f"  workers: {t.worker_node_count} x {t.worker_node.description} ({_fmt_resources(t.worker_node.resources)})",
        f"  control plane: {t.control_plane_node_count} nodes, schedulable: {t.schedulable_control_plane}",
        f"  cpu over-commit ratio: {t.cpu_over_commit_ratio:g}",
        f"  hyperconverged: {t.hyperconverged}, odf: {t.odf}",
    ]
    return "\n".join(p)


def explain_estimate(e: ClusterCapacityEstimate) -> str:
    p = [
        "Estimated cluster capacity:",
        f"  consumed by system:     {_fmt_resources(e.consumed_by_system)}",
        f"  reserved for overhead:  {_fmt_resources(e.reserved_for_overhead)}",
        f"  available to workloads: {_fmt_resources(e.available_to_workloads)}",
    ]
    if e.reasoning:
        p.append("  reasoning:")
        p.extend(f"    - {r}" for r in e.reasoning)
    return "\n".join(p)


def _emit(args: argparse.Namespace, data: dict, text: str) -> None:
    if args.json:
        print(json.dumps(data, indent=2, sort_keys=True))
    else:
        print(text)


# ---------------------------
# Commands
# ---------------------------


def _cluster(args: argparse.Namespace) -> ClusterTopology:
    if args.cluster_file:
        return load_topology_from_file(args.cluster_file)
    return presets.get_cluster(args.cluster)


def _instance_type(args: argparse.Namespace) -> InstanceType:
    if args.instance_type_file:
        return load_instance_type_from_file(args.instance_type_file)
    return presets.get_instance_type(args.instance_type)


def cmd_estimate(args: argparse.Namespace, settings: SizerSettings) -> int:
    cluster = _cluster(args)
    est = estimate(cluster, settings)
    _emit(
        args,
        {"cluster": topology_to_dict(cluster), "estimate": estimate_to_dict(est)},
        explain_cluster(cluster) + "\n" + explain_estimate(est),
    )
    return 0


def cmd_fit(args: argparse.Namespace, settings: SizerSettings) -> int:
    cluster = _cluster(args)
    it = _instance_type(args)
    available = estimate(cluster, settings).available_to_workloads
    result = fit(available, it)

    data = {"cluster": topology_to_dict(cluster), "fit": fit_to_dict(result)}
    lines = [f"{it.name}: {result}"]
    if args.vm_count is not None:
        w = Workload(instance_type=it, vm_count=args.vm_count)
        ok = satisfies(available, w)
        delta = headroom(available, w)
        data.update(workload=workload_to_dict(w), satisfies=ok, headroom=delta)
        lines.append(f"{w.vm_count} x {it.name} fit: {ok}")
        lines.append(
            "Avail - req: " + ", ".join(f"{d} {q:g}" for d, q in delta.items())
        )
    _emit(args, data, "\n".join(lines))
    return 0


def cmd_size(args: argparse.Namespace, settings: SizerSettings) -> int:
    template = _cluster(args)
    it = _instance_type(args)
    policy = get_policy(args.policy) if args.policy else None

    result = size_for(args.count, it, template, settings, policy=policy)
    if isinstance(result, Infeasible):
        _emit(args, {"infeasible": infeasible_to_dict(result)}, str(result))
        return EXIT_INFEASIBLE

    est = estimate(result, settings)
    f = fit(est.available_to_workloads, it)
    _emit(
        args,
        {
            "cluster": topology_to_dict(result),
            "estimate": estimate_to_dict(est),
            "fit": fit_to_dict(f),
        },
        "\n".join([
            f"Cluster for {args.count} x {it.name}:",
            explain_cluster(result),
            explain_estimate(est),
            f"Fits: {f}",
        ]),
    )
    return 0


def cmd_demo(args: argparse.Namespace, settings: SizerSettings) -> int:
    """Пошаговый пример: оценка, проверка workload-а, обратный расчёт."""
    cluster = presets.get_cluster("hyperconverged")
    it = presets.get_instance_type("u1.medium")
    w = Workload(instance_type=it, vm_count=100)

    est = estimate(cluster, settings)
    available = est.available_to_workloads
    print(explain_cluster(cluster))
    print(explain_estimate(est))
    print(f"Workloads: {w.vm_count} x {it.name} ({_fmt_resources(it.footprint)} each)")
    print("Avail - req: " + ", ".join(f"{d} {q:g}" for d, q in headroom(available, w).items()))
    print(f"Workload fit into estimate? {satisfies(available, w)}")
    print(f"Workload how many fit into estimate? {fit(available, it)}")

    sized = size_for(w.vm_count, it, cluster, settings)
    if isinstance(sized, Infeasible):
        print(str(sized))
        return EXIT_INFEASIBLE
    print(f"Cluster estimate for workload:\n{explain_cluster(sized)}")
    return 0


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="cluster-sizer",
        description="Capacity estimation and sizing for on-premises virtualization clusters.",
    )
    parser.add_argument("--config", help="JSON-файл с настройками (SizerSettings).")
    parser.add_argument("--log-level", help="Уровень логирования (по умолчанию из настроек).")
    parser.add_argument("--json", action="store_true", help="Вывод в JSON.")

    sub = parser.add_subparsers(dest="command", required=True)

    def add_cluster_args(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--cluster",
            default="hyperconverged",
            choices=sorted(presets.CLUSTERS),
            help="Пресет топологии (по умолчанию hyperconverged).",
        )
        p.add_argument("--cluster-file", help="JSON-файл с топологией вместо пресета.")

    def add_instance_args(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--instance-type",
            default="u1.medium",
            choices=sorted(presets.INSTANCE_TYPES),
            help="Пресет instance type (по умолчанию u1.medium).",
        )
        p.add_argument("--instance-type-file", help="JSON-файл с instance type.")

    p_est = sub.add_parser("estimate", help="Ёмкость кластера для workload-ов.")
    add_cluster_args(p_est)
    p_est.set_defaults(func=cmd_estimate)

    p_fit = sub.add_parser("fit", help="Сколько инстансов влезает в кластер.")
    add_cluster_args(p_fit)
    add_instance_args(p_fit)
    p_fit.add_argument("--vm-count", type=int, help="Проверить, влезает ли столько VM.")
    p_fit.set_defaults(func=cmd_fit)

    p_size = sub.add_parser("size", help="Минимальная топология под нужное число VM.")
    add_cluster_args(p_size)
    add_instance_args(p_size)
    p_size.add_argument("--count", type=int, required=True, help="Целевое число VM.")
    p_size.add_argument("--policy", choices=sorted(POLICIES), help="Политика для control plane.")
    p_size.set_defaults(func=cmd_size)

    p_demo = sub.add_parser("demo", help="Пример расчёта на встроенных пресетах.")
    p_demo.set_defaults(func=cmd_demo)

    return parser.parse_args(argv)


def main_cli(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    try:
        settings = load_settings(args.config)
        configure_logging(args.log_level or settings.log_level)
        return args.func(args, settings)
    except KeyError as e:
        log.error("%s", e.args[0])
        return EXIT_ERROR
    except (ValueError, OSError) as e:
        log.error("%s", e)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main_cli())
