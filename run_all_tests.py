#!/usr/bin/env python3
"""
Test runner script for the SAR dog competition system.

This script runs all test suites or one category of them.
"""

import unittest
import sys
import os
import time

# Add current directory to Python path to ensure imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

TEST_CATEGORIES = {
    'database': 'test_database.py',
    'registration': 'test_registration.py',
    'review': 'test_review.py',
    'rating': 'test_rating.py',
    'reports': 'test_reports.py',
    'api': 'test_api.py'
}


def load_suite(test_files, loader):
    """Load the tests of every listed file into one suite."""
    all_tests = unittest.TestSuite()

    for test_file in test_files:
        if not os.path.exists(test_file):
            print(f"  - Skipping {test_file} (file not found)")
            continue

        print(f"Loading tests from: {test_file}")
        module_name = test_file.replace('.py', '')
        module = __import__(module_name)
        tests = loader.loadTestsFromModule(module)
        all_tests.addTests(tests)
        print(f"  ✓ Loaded {tests.countTestCases()} test cases")

    return all_tests


def discover_and_run_tests(test_files=None):
    """Run the given test files, all of them by default."""
    print("=" * 80)
    print("SAR DOG COMPETITION SYSTEM TEST SUITE")
    print("=" * 80)
    print()

    start_time = time.time()

    all_tests = load_suite(test_files or list(TEST_CATEGORIES.values()), unittest.TestLoader())

    print()
    print(f"Total test cases: {all_tests.countTestCases()}")
    print()
    print("Running tests...")
    print("-" * 80)

    runner = unittest.TextTestRunner(
        verbosity=2,
        stream=sys.stdout,
        descriptions=True,
        failfast=False
    )
    result = runner.run(all_tests)

    print()
    print("-" * 80)
    print("TEST SUMMARY")
    print("-" * 80)

    duration = time.time() - start_time

    print(f"Tests run: {result.testsRun}")
    print(f"Failures: {len(result.failures)}")
    print(f"Errors: {len(result.errors)}")
    print(f"Skipped: {len(result.skipped)}")
    print(f"Duration: {duration:.2f} seconds")
    print()

    if result.wasSuccessful():
        print("ALL TESTS PASSED!")
        return 0
    else:
        print("SOME TESTS FAILED!")
        print("Please review the failures and errors above.")
        return 1


def main():
    """Main entry point."""
    if len(sys.argv) > 1:
        command = sys.argv[1].lower()

        if command == 'all':
            return discover_and_run_tests()
        elif command in TEST_CATEGORIES:
            return discover_and_run_tests([TEST_CATEGORIES[command]])
        elif command == 'help':
            print("Test Runner Usage:")
            print()
            print("  python run_all_tests.py [command]")
            print()
            print("Commands:")
            print("  all          - Run all tests (default)")
            for category, test_file in TEST_CATEGORIES.items():
                print(f"  {category:<12} - Run {test_file} only")
            print("  help         - Show this help message")
            print()
            return 0
        else:
            print(f"Unknown command: {command}")
            print("Use 'python run_all_tests.py help' for usage information.")
            return 1
    else:
        return discover_and_run_tests()


if __name__ == '__main__':
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\nTest run interrupted by user.")
        sys.exit(1)
