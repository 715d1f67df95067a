import argparse
import json
import logging
from collections import Counter
from pathlib import Path

from mdcgen.synthesis import GenerationConfig, GenerationSettings, run_generation
from mdcgen.synthesis.utils import to_jsonable

DEMO_CONFIG = {
    "nDatapoints": 1000,
    "nDimensions": 2,
    "nClusters": 3,
    "nOutliers": 20,
    "compactness": 0.1,
    "validity": {"Gindices": True, "Silhouette": True},
}


def main():
    parser = argparse.ArgumentParser(description="Multidimensional Clustered Data Generation")

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file with the generation config (camelCase keys); demo config if omitted",
    )
    parser.add_argument("--seed", type=int, default=42, help="Master random seed")
    parser.add_argument(
        "--n-jobs", type=int, default=1, help="Worker processes for per-cluster generation"
    )
    parser.add_argument("--verbose", action="store_true", help="Log per-cluster choices")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    if args.config is not None:
        mapping = json.loads(args.config.read_text(encoding="utf-8"))
    else:
        mapping = DEMO_CONFIG

    config = GenerationConfig.from_mapping(mapping)
    settings = GenerationSettings(seed=args.seed, n_jobs=args.n_jobs)

    result = run_generation(config, settings)

    summary = {
        "shape": list(result.data.shape),
        "label_counts": dict(sorted(Counter(result.labels.tolist()).items())),
        "centroids": result.centroids,
        "designs": result.designs,
        "perf": result.perf.as_dict(),
    }
    print(json.dumps(to_jsonable(summary), indent=2))


if __name__ == "__main__":
    main()
