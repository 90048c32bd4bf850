"""Command-line interface for variantsieve.

ARCHITECTURE:
    CLI Commands → VariantDataService + FilterRunner → JSON Output

Two workflows: annotate (single allele lookup), filter (batch annotate + filter)

Key Design:
- Typer framework for auto-help and type validation
- asyncio.run() bridges sync CLI → async batch helpers
- Store is either a local JSON dump or a remote allele service
"""

import asyncio
import json
from contextlib import nullcontext
from pathlib import Path
from typing import Any, Optional

import typer
from dotenv import load_dotenv

from variantsieve.api.store import HttpAlleleStore, InMemoryAlleleStore
from variantsieve.config import AnalysisSettings
from variantsieve.exceptions import VariantSieveError
from variantsieve.filters import FilterRunMode, FilterRunner
from variantsieve.models.variant import GenomicKey, VariantEvaluation
from variantsieve.service import VariantDataService

load_dotenv()

app = typer.Typer(
    name="variantsieve",
    help="Annotate genomic variants with frequency and pathogenicity data and filter them",
    add_completion=False,
)


def _open_store(store: Optional[Path], store_url: Optional[str], timeout: float):
    if store is not None:
        if not store.exists():
            print(f"Error: Allele store file not found: {store}")
            raise typer.Exit(1)
        try:
            return nullcontext(InMemoryAlleleStore.from_json(store))
        except ValueError as e:
            print(f"Error: {e}")
            raise typer.Exit(1)
    if store_url:
        return HttpAlleleStore(store_url, timeout=timeout)
    print("Error: Provide --store or --store-url (or set VARIANTSIEVE_STORE_URL)")
    raise typer.Exit(1)


def _load_settings(config: Optional[Path]) -> AnalysisSettings:
    try:
        return AnalysisSettings.from_json(config) if config else AnalysisSettings.from_env()
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        raise typer.Exit(1)


def _load_variants(path: Path) -> list[VariantEvaluation]:
    """Read variants from a JSON list; each item holds either ``key`` or the four key fields."""
    with open(path, "r") as f:
        data = json.load(f)

    variants = []
    for item in data:
        item = dict(item)
        if isinstance(item.get("key"), str):
            item["key"] = GenomicKey.parse(item["key"])
        elif "key" not in item:
            item["key"] = {name: item.pop(name) for name in ("chromosome", "position", "ref", "alt")}
        variants.append(VariantEvaluation.model_validate(item))
    return variants


def _summary(variant: VariantEvaluation) -> dict[str, Any]:
    return {
        "variant": str(variant.key),
        "gene": variant.gene_symbol,
        "effect": variant.variant_effect.value,
        "status": variant.filter_status.value,
        **variant.model_dump(mode="json", include={"frequency_data", "pathogenicity_data", "filter_results"}),
    }


@app.command()
def annotate(
    key: str = typer.Argument(..., help="Variant as chrom-pos-ref-alt (e.g., 1-12345-A-T)"),
    store: Optional[Path] = typer.Option(None, "--store", "-s", help="Allele store JSON file"),
    store_url: Optional[str] = typer.Option(None, "--store-url", help="Remote allele store URL"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Settings JSON file"),
) -> None:
    """Look up frequency and pathogenicity data for a single variant."""
    settings = _load_settings(config)
    try:
        genomic_key = GenomicKey.parse(key)
    except ValueError as e:
        print(f"Error: Invalid variant key '{key}': {e}")
        raise typer.Exit(1)

    with _open_store(store, store_url or settings.store_url, settings.store_timeout) as allele_store:
        service = VariantDataService(allele_store)
        try:
            frequency_data = service.get_frequency_data(genomic_key, settings.frequency_sources)
            pathogenicity_data = service.get_pathogenicity_data(
                genomic_key, settings.pathogenicity_sources
            )
        except VariantSieveError as e:
            print(f"Error: {e}")
            raise typer.Exit(1)

    output = {
        "variant": str(genomic_key),
        "frequency_data": frequency_data.model_dump(mode="json"),
        "pathogenicity_data": pathogenicity_data.model_dump(mode="json"),
        "regulatory_effect": service.get_regulatory_effect(genomic_key).value,
    }
    print(json.dumps(output, indent=2))


@app.command(name="filter")
def filter_variants(
    input_file: Path = typer.Argument(..., help="Input JSON file with variants"),
    store: Optional[Path] = typer.Option(None, "--store", "-s", help="Allele store JSON file"),
    store_url: Optional[str] = typer.Option(None, "--store-url", help="Remote allele store URL"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Settings JSON file"),
    output: Path = typer.Option("filtered.json", "--output", "-o", help="Output file"),
    mode: Optional[FilterRunMode] = typer.Option(None, "--mode", "-m", help="full or pass-only"),
    skip_errors: bool = typer.Option(False, "--skip-errors", help="Skip variants with malformed store records"),
    log: bool = typer.Option(True, "--log/--no-log", help="Enable filter decision logging"),
) -> None:
    """Annotate and filter a batch of variants."""

    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}")
        raise typer.Exit(1)

    settings = _load_settings(config)
    if mode is not None:
        settings = settings.model_copy(update={"run_mode": mode})

    try:
        variants = _load_variants(input_file)
    except (KeyError, TypeError, ValueError) as e:
        print(f"Error: Invalid input file {input_file}: {e}")
        raise typer.Exit(1)
    print(f"\nLoaded {len(variants)} variants from {input_file}")

    async def run_filter(service: VariantDataService) -> list[VariantEvaluation]:
        annotated = await service.annotate_all(
            variants,
            settings.frequency_sources,
            settings.pathogenicity_sources,
            max_concurrent=settings.max_concurrent,
            skip_errors=skip_errors,
        )
        runner = FilterRunner(settings.build_filters(), run_mode=settings.run_mode, enable_logging=log)
        return await runner.run_all_async(
            annotated, max_concurrent=settings.max_concurrent, skip_errors=skip_errors
        )

    with _open_store(store, store_url or settings.store_url, settings.store_timeout) as allele_store:
        service = VariantDataService(allele_store, enable_logging=log)
        try:
            results = asyncio.run(run_filter(service))
        except VariantSieveError as e:
            print(f"Error: {e}")
            raise typer.Exit(1)

    with open(output, "w") as f:
        json.dump([_summary(variant) for variant in results], f, indent=2)

    passed = sum(1 for variant in results if variant.passed_filters)
    print(f"\n{passed}/{len(results)} variants passed all filters")
    print(f"Results saved to {output}")

    # Simple failure counts
    failure_counts: dict[str, int] = {}
    for variant in results:
        for filter_type in variant.failed_filter_types:
            failure_counts[filter_type.value] = failure_counts.get(filter_type.value, 0) + 1

    if failure_counts:
        print("\nFailures by filter:")
        for name, count in sorted(failure_counts.items()):
            print(f"  {name}: {count}")


@app.command()
def version() -> None:
    """Show version information."""
    from variantsieve import __version__
    print(f"variantsieve version {__version__}")


if __name__ == "__main__":
    app()
