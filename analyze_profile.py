#!/usr/bin/env python3
"""
CPU Profile Analyzer - Command Line Entry Point
"""

import json
import sys
from profile_analyzer import ProfileAnalyzer
from profile_analyzer.core.errors import ProfileAnalyzerError
from profile_analyzer.extractors import StaticModuleResolver
from profile_analyzer.processors import ProfileFileProcessor
from profile_analyzer.storage import Archive
from profile_analyzer.web import prepare_results


def main():
    import argparse
    parser = argparse.ArgumentParser(
        description='Reconstruct a CPU profile and aggregate its time under named function/module locators.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python analyze_profile.py trace.json --locators locators.json
  python analyze_profile.py app.cpuprofile --locators locators.json --categories categories.json
  python analyze_profile.py trace.json --locators locators.json --archive page.har
  python analyze_profile.py trace.json --locators locators.json --min 1000 --max 250000
        """
    )
    parser.add_argument('input_file', help='Path to the .cpuprofile or trace JSON file')
    parser.add_argument('-l', '--locators', required=True,
                       help='JSON array of {functionName, moduleName} locators')
    parser.add_argument('-c', '--categories', help='JSON object of category -> locators')
    parser.add_argument('-a', '--archive', help='HAR file with script sources for module resolution')
    parser.add_argument('-m', '--module-map', help='JSON object of script URL -> module name')
    parser.add_argument('--min', dest='window_min', type=float, default=-1,
                       help='Ignore samples at or before this timestamp')
    parser.add_argument('--max', dest='window_max', type=float, default=-1,
                       help='Ignore samples at or after this timestamp')
    parser.add_argument('--no-collapse', action='store_true',
                       help='Keep duplicate call stacks in each bucket')
    parser.add_argument('-o', '--output', dest='output_file', default='profile_analysis.json',
                       help='Output JSON file')
    args = parser.parse_args()

    try:
        locators = ProfileFileProcessor.load_locators(args.locators)
        categories = ProfileFileProcessor.load_categories(args.categories) if args.categories else {}
        archive = Archive.from_file(args.archive) if args.archive else None
        module_resolver = None
        if args.module_map:
            module_resolver = StaticModuleResolver(ProfileFileProcessor.load_module_map(args.module_map))

        analyzer = ProfileAnalyzer(
            locators,
            categories=categories,
            window_min=args.window_min,
            window_max=args.window_max,
            collapse_call_frames=not args.no_collapse,
            archive=archive,
            module_resolver=module_resolver
        )

        print(f"\nConfiguration:")
        print(f"  Input file: {args.input_file}")
        print(f"  Locators: {len(analyzer.locators)}")
        print(f"  Categories: {len(categories)}")
        print(f"  Window: ({args.window_min}, {args.window_max})")
        print(f"  Collapse call frames: {not args.no_collapse}\n")
        analyzer.process_profile_file(args.input_file)

        with open(args.output_file, 'w', encoding='utf-8') as f:
            json.dump(prepare_results(analyzer), f, indent=2)
        print(f"\n✓ Analysis complete! Results written to {args.output_file}")
    except FileNotFoundError as e:
        print(f"Error: File '{e.filename}' not found.")
        sys.exit(1)
    except ProfileAnalyzerError as e:
        print(f"Error: {e}")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
