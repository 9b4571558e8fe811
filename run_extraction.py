#!/usr/bin/env python3
"""
Main extraction runner for Algerian legal texts.

Extracts publications from .txt/.pdf files (or synthetic demo texts), maps
them onto a form, queues them for approval and exports the queue.
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from legal_extraction.config import Settings
from legal_extraction.exporters import ApprovalExporter
from legal_extraction.pipeline import LegalDocumentPipeline
from legal_extraction.utils.synthetic_data import SyntheticLegalTextGenerator


def print_result(result):
    """Print a short summary of one processed document."""
    publication = result.publication
    item = result.approval_item
    print(f"\n📄 {result.source}")
    print(f"  Type: {publication.type} ({publication.power_emitter})")
    print(f"  Number: {publication.number or '-'}  Date: {publication.date or '-'}")
    print(f"  Institution: {publication.institution or '-'}")
    print(f"  Form: {result.form_type}")
    for mapped in result.mapping.mapped_fields:
        value = mapped.mapped_value.replace("\n", " | ")
        if len(value) > 60:
            value = value[:57] + "..."
        print(f"    • {mapped.field_name}: {value} ({mapped.confidence:.0%})")
    if result.mapping.unmapped_fields:
        print(f"    ⚠️  Unmapped: {', '.join(result.mapping.unmapped_fields)}")
    print(f"  Approval: {item.status.value} ({item.overall_confidence:.0%}), "
          f"assigned to {item.assigned_to}")


def main():
    """Main entry point.

    Returns:
        int: Exit code (0 for success, 1 for failure).
    """
    parser = argparse.ArgumentParser(
        description="Algerian legal text extraction - regex extraction, form mapping and approval"
    )
    parser.add_argument(
        'files',
        nargs='*',
        help='Text or PDF files to process'
    )
    parser.add_argument(
        '--demo',
        type=int,
        nargs='?',
        const=3,
        default=0,
        metavar='N',
        help='Process N synthetic legal texts (default 3)'
    )
    parser.add_argument(
        '--form-type',
        help='Form to map onto (default: detected publication type)'
    )
    parser.add_argument(
        '--export',
        choices=['json', 'csv', 'excel'],
        help='Export the approval queue in this format'
    )
    parser.add_argument(
        '--output-dir',
        help='Directory for results and exports'
    )
    parser.add_argument(
        '--save',
        action='store_true',
        help='Save one JSON result per document'
    )
    parser.add_argument(
        '--log-level',
        default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default from LOG_LEVEL)'
    )

    args = parser.parse_args()

    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"❌ Invalid configuration: {e}")
        return 1
    if args.output_dir:
        settings.output_dir = Path(args.output_dir)

    logging.basicConfig(
        level=getattr(logging, args.log_level or settings.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if not args.files and not args.demo:
        parser.print_help()
        return 1

    print("=" * 60)
    print("ALGERIAN LEGAL TEXT EXTRACTION")
    print(f"Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("=" * 60)

    pipeline = LegalDocumentPipeline(settings)
    results = []

    if args.files:
        existing = [f for f in args.files if Path(f).exists()]
        for missing in sorted(set(args.files) - set(existing)):
            print(f"⚠️  File not found: {missing}")
        results.extend(pipeline.process_files(existing, args.form_type))

    if args.demo:
        generator = SyntheticLegalTextGenerator(seed=42)
        for i, generated in enumerate(generator.generate_batch(args.demo), 1):
            try:
                results.append(pipeline.process_text(
                    generated.text,
                    form_type=args.form_type,
                    source=f"demo_{i}_{generated.language}"
                ))
            except ValueError as e:
                print(f"❌ demo_{i}: {e}")

    if not results:
        print("\n❌ No documents processed")
        return 1

    for result in results:
        print_result(result)
        if args.save:
            pipeline.save_result(result)

    stats = pipeline.approval_service.get_approval_stats()
    print("\n📊 Approval Queue:")
    for key in ('total_items', 'pending_items', 'approved_items', 'rejected_items'):
        print(f"  {key.replace('_', ' ').title()}: {stats[key]}")
    print(f"  Average Confidence: {stats['average_confidence']:.2%}")

    if args.export:
        exporter = ApprovalExporter(settings.output_dir / "exports")
        items = [r.approval_item for r in results]
        filename = f"approval_queue_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
        export = {
            'json': exporter.export_to_json,
            'csv': exporter.export_to_csv,
            'excel': exporter.export_to_excel,
        }[args.export]
        print(f"\n📁 Exported to: {export(items, filename)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
