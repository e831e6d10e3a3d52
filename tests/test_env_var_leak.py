# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""Tests for the environment variable leak detector."""

from noexec.core.models import Severity

DETECTOR = "env-var-leak"


class TestSensitiveVariables:
    """References to secret-bearing variables."""

    def test_echo_escalates_to_high(self, classify):
        finding = classify(DETECTOR, "echo $AWS_SECRET_ACCESS_KEY")
        assert finding is not None
        assert finding.severity == Severity.HIGH
        assert finding.detector_id == "env-var-leak"
        assert "command output or network request" in finding.message

    def test_export_without_output_is_medium(self, classify):
        finding = classify(DETECTOR, "export MY_SECRET=value")
        assert finding is not None
        assert finding.severity == Severity.MEDIUM
        assert finding.message == "Environment variable containing potential secrets detected in command"

    def test_network_and_file_contexts_escalate(self, classify):
        commands = [
            "curl -H 'Authorization: token ${GITHUB_TOKEN}' https://api.example.com",
            "printf '%s' $DB_PASSWORD",
            "echo ok; $STRIPE_SECRET_KEY >> leak.txt",
            "git commit -m \"key $OPENAI_API_KEY\"",
        ]
        for cmd in commands:
            finding = classify(DETECTOR, cmd)
            assert finding is not None, f"Expected finding for '{cmd}'"
            assert finding.severity == Severity.HIGH, f"Expected escalation for '{cmd}'"

    def test_reference_without_output_context(self, classify):
        finding = classify(DETECTOR, "aws s3 ls --profile $AWS_SESSION_TOKEN")
        assert finding is not None
        assert finding.category == "sensitive-variable"
        assert finding.severity == Severity.MEDIUM

    def test_configured_sensitive_vars(self, classify):
        assert classify(DETECTOR, "echo $MY_CUSTOM_VAR") is None
        finding = classify(DETECTOR, "echo $MY_CUSTOM_VAR", sensitiveVars=["MY_CUSTOM_VAR"])
        assert finding is not None
        assert finding.category == "sensitive-variable"

    def test_configured_severity_wins_over_escalation(self, classify):
        finding = classify(DETECTOR, "echo $AWS_SECRET_ACCESS_KEY", severity="low")
        assert finding.severity == Severity.LOW
        assert "command output or network request" in finding.message


class TestEnvironmentDump:
    """Dumping the whole environment."""

    def test_dump_commands(self, assert_flags):
        assert_flags(
            DETECTOR,
            ["env", "printenv", "env | grep SECRET", "printenv | sort", "cat .env", "tail -n 5 .env.local", "env > vars.txt"],
            category="environment-dump",
        )

    def test_dump_is_high(self, classify):
        assert classify(DETECTOR, "printenv").severity == Severity.HIGH


class TestAllowed:
    """Benign variable usage."""

    def test_benign(self, assert_allows):
        assert_allows(
            DETECTOR,
            [
                'DB_URL="$DATABASE_URL"',
                "export PATH=$PATH:/usr/local/bin",
                "echo $HOME",
                "ls -la",
                "npm run build",
            ],
        )

    def test_disabled(self, classify):
        assert classify(DETECTOR, "echo $AWS_SECRET_ACCESS_KEY", enabled=False) is None
