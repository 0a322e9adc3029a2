"""Parse scenario result files into test cases."""

import csv
import io
from collections.abc import Callable
from pathlib import Path
from xml.etree import ElementTree

from ..plan.models import TestCase
from .errors import TestAutomationError

SAMPLE_TAGS = {"httpSample", "sample"}

ResultParser = Callable[[Path, str], list[TestCase]]


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise TestAutomationError(f"Cannot read result file: {e}", str(path)) from e


def _parse_xml(path: Path, content: str) -> ElementTree.Element:
    try:
        return ElementTree.fromstring(content)
    except ElementTree.ParseError as e:
        raise TestAutomationError(f"Invalid result file: {e}", str(path)) from e


def _jmeter_failure_message(sample: ElementTree.Element) -> str | None:
    for assertion in sample.findall("assertionResult"):
        failed = (assertion.findtext("failure") or "").strip() == "true"
        errored = (assertion.findtext("error") or "").strip() == "true"
        if failed or errored:
            message = assertion.findtext("failureMessage")
            if message:
                return message.strip()
    return sample.get("rm")


def parse_jmeter_results(path: Path, scenario_name: str) -> list[TestCase]:
    """Parse a JMeter result file (XML or CSV JTL).

    Each top-level sample is one test case named by its label.

    Raises:
        TestAutomationError: If the file cannot be read or parsed.
    """
    content = _read(path)
    if content.lstrip().startswith("<"):
        root = _parse_xml(path, content)
        return [
            TestCase(
                name=sample.get("lb", ""),
                success=sample.get("s") == "true",
                failure_message=None if sample.get("s") == "true" else _jmeter_failure_message(sample),
                scenario_name=scenario_name,
            )
            for sample in root
            if sample.tag in SAMPLE_TAGS
        ]

    reader = csv.DictReader(io.StringIO(content))
    if not reader.fieldnames or "label" not in reader.fieldnames or "success" not in reader.fieldnames:
        raise TestAutomationError("CSV result file needs 'label' and 'success' columns", str(path))

    test_cases = []
    for row in reader:
        success = (row.get("success") or "").strip().lower() == "true"
        test_cases.append(
            TestCase(
                name=row["label"],
                success=success,
                failure_message=None
                if success
                else (row.get("failureMessage") or row.get("responseMessage") or None),
                scenario_name=scenario_name,
            )
        )
    return test_cases


def parse_junit_results(path: Path, scenario_name: str) -> list[TestCase]:
    """Parse a JUnit-style XML report (as written by TestNG and surefire).

    Skipped test cases are left out.

    Raises:
        TestAutomationError: If the file cannot be read or parsed.
    """
    root = _parse_xml(path, _read(path))
    test_cases = []
    for element in root.iter("testcase"):
        if element.find("skipped") is not None:
            continue

        failure = element.find("failure")
        if failure is None:
            failure = element.find("error")

        classname = element.get("classname")
        name = element.get("name", "")
        message = None
        if failure is not None:
            message = failure.get("message") or (failure.text or "").strip() or None

        test_cases.append(
            TestCase(
                name=f"{classname}.{name}" if classname else name,
                success=failure is None,
                failure_message=message,
                scenario_name=scenario_name,
            )
        )
    return test_cases


# Glob patterns (relative to the scenario directory) and the parser for them
RESULT_PARSERS: dict[str, tuple[list[str], ResultParser]] = {
    "jmeter": (["**/*.jtl", "Results/Jmeter/*.xml"], parse_jmeter_results),
    "junit": (["**/TEST-*.xml"], parse_junit_results),
}


def collect_test_cases(scenario_dir: Path, scenario_name: str) -> list[TestCase]:
    """Collect test cases from every known result file under a scenario directory.

    Args:
        scenario_dir: The scenario directory.
        scenario_name: Name recorded on each test case.

    Returns:
        Test cases in file path order.

    Raises:
        TestAutomationError: If a result file cannot be parsed.
    """
    seen: set[Path] = set()
    test_cases: list[TestCase] = []

    for patterns, parser in RESULT_PARSERS.values():
        files = sorted({f for pattern in patterns for f in scenario_dir.glob(pattern) if f.is_file()})
        for result_file in files:
            if result_file in seen:
                continue
            seen.add(result_file)
            test_cases.extend(parser(result_file, scenario_name))

    return test_cases
