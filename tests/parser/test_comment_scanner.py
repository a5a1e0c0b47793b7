"""Tests for valuesdoc.parser.comments."""

from __future__ import annotations

import textwrap
from dataclasses import asdict
from pathlib import Path

import pytest

from valuesdoc.config import CommentsConfig, GeneratorConfig, TagsConfig
from valuesdoc.parser.comments import (
    CommentTagScanner,
    ScanState,
    parse_metadata_comments,
    parse_yaml_line,
    scan_metadata,
)


def _scan(text: str, config: GeneratorConfig | None = None):
    return scan_metadata(textwrap.dedent(text).lstrip("\n"), config)


def _names(metadata) -> list[str]:
    return [parameter.name for parameter in metadata.parameters]


def test_parse_yaml_line_reads_indent_key_and_value() -> None:
    line = parse_yaml_line("    tag: 1.2.3")
    assert line is not None
    assert line.indent == 4
    assert line.key == "tag"
    assert line.value == "1.2.3"
    assert line.has_value is True


@pytest.mark.parametrize("value", ["", "{}", "[]"])
def test_parse_yaml_line_treats_empty_containers_as_no_value(value: str) -> None:
    line = parse_yaml_line(f"resources: {value}")
    assert line is not None
    assert line.key == "resources"
    assert line.has_value is False


@pytest.mark.parametrize("text", ["## @param foo: bar", "  # comment: here", "- item", "", "plain text"])
def test_parse_yaml_line_ignores_non_structural_lines(text: str) -> None:
    assert parse_yaml_line(text) is None


def test_auto_path_from_next_line() -> None:
    metadata = _scan(
        """
        ## @param replicaCount Number of replicas
        replicaCount: 3
        """
    )

    assert len(metadata.parameters) == 1
    parameter = metadata.parameters[0]
    assert parameter.name == "replicaCount"
    assert parameter.description == "Number of replicas"
    assert parameter.type is None
    assert parameter.value is None


def test_auto_path_without_key_echo_keeps_full_description() -> None:
    metadata = _scan(
        """
        ## @param Number of replicas
        replicaCount: 3
        """
    )

    assert metadata.parameters[0].name == "replicaCount"
    assert metadata.parameters[0].description == "Number of replicas"


def test_section_with_key_echo_and_modifiers() -> None:
    metadata = _scan(
        """
        ## @section Common parameters
        ## @param nameOverride [default: ""] Override name
        nameOverride: ""
        """
    )

    assert [section.name for section in metadata.sections] == ["Common parameters"]
    section = metadata.sections[0]
    assert len(section.parameters) == 1
    parameter = section.parameters[0]
    assert parameter.name == "nameOverride"
    assert parameter.modifiers == ['default: ""']
    assert parameter.description == "Override name"
    assert parameter.section == "Common parameters"
    assert metadata.parameters == [parameter]


def test_explicit_path_is_used_verbatim() -> None:
    metadata = _scan(
        """
        image:
          ## @param (global.imageRegistry) [string, nullable] Registry override
          registry: docker.io
        """
    )

    parameter = metadata.parameters[0]
    assert parameter.name == "global.imageRegistry"
    assert parameter.modifiers == ["string", "nullable"]
    assert parameter.description == "Registry override"


def test_unresolved_parameter_is_dropped() -> None:
    metadata = _scan("## @param image.tag Image tag\n")

    assert metadata.parameters == []


def test_nested_paths_follow_indentation() -> None:
    metadata = _scan(
        """
        image:
          ## @param Image registry
          registry: docker.io
          ## @param Image repository
          repository: bitnami/nginx
        service:
          ports:
            ## @param HTTP port
            http: 80
        ## @param Replica count
        replicaCount: 1
        """
    )

    assert _names(metadata) == [
        "image.registry",
        "image.repository",
        "service.ports.http",
        "replicaCount",
    ]


def test_pending_parameter_resolves_on_later_structural_line() -> None:
    metadata = _scan(
        """
        ## @param Documented key

        # plain comment in between
        later:
          child: 1
        """
    )

    # The first structural line after the tag wins, however far away.
    assert _names(metadata) == ["later"]
    assert metadata.parameters[0].description == "Documented key"


def test_pending_parameter_is_replaced_by_next_tag() -> None:
    metadata = _scan(
        """
        ## @param First
        ## @param Second
        key: value
        """
    )

    assert len(metadata.parameters) == 1
    assert metadata.parameters[0].description == "Second"
    assert metadata.parameters[0].name == "key"


def test_parameters_attach_to_current_section_only() -> None:
    metadata = _scan(
        """
        ## @param (orphan) Before any section
        ## @section First
        ## @param (a) A
        ## @section Second
        ## @param (b) B
        """
    )

    assert metadata.parameters[0].section is None
    first, second = metadata.sections
    assert [parameter.name for parameter in first.parameters] == ["a"]
    assert [parameter.name for parameter in second.parameters] == ["b"]
    assert _names(metadata) == ["orphan", "a", "b"]


def test_section_description_block() -> None:
    metadata = _scan(
        """
        ## @section Global parameters
        ## @descriptionStart Global values shared
        ## across subcharts.
        ##
        ## @descriptionEnd
        ## @param (global.storageClass) Storage class
        """
    )

    section = metadata.sections[0]
    assert section.description == ["Global values shared", "across subcharts.", ""]
    assert section.description_text == "Global values shared\nacross subcharts.\n"
    assert [parameter.name for parameter in section.parameters] == ["global.storageClass"]


def test_description_start_outside_section_is_ignored() -> None:
    metadata = _scan(
        """
        ## @descriptionStart
        ## Not captured
        ## @descriptionEnd
        ## @section Later
        """
    )

    assert metadata.sections[0].description == []


def test_skip_tag_marks_parameter() -> None:
    metadata = _scan(
        """
        ## @section Misc
        ## @skip extraDeploy
        extraDeploy:
          - kind: ConfigMap
        ## @skip (podLabels.team)
        """
    )

    skipped = metadata.parameters
    assert [parameter.name for parameter in skipped] == ["extraDeploy", "podLabels.team"]
    assert all(parameter.skip for parameter in skipped)
    assert skipped[0].description == ""
    assert skipped[0].modifiers == []
    assert skipped[0].section == "Misc"


def test_extra_tag_forces_empty_value() -> None:
    metadata = _scan(
        """
        ## @extra (ingress.tls[0].hosts) [array] TLS hosts
        ## @extra Documented only
        ingress:
          enabled: false
        """
    )

    explicit, auto = metadata.parameters
    assert explicit.name == "ingress.tls[0].hosts"
    assert explicit.extra is True
    assert explicit.value == ""
    assert explicit.modifiers == ["array"]
    assert auto.name == "ingress"
    assert auto.extra is True
    assert auto.value == ""


def test_modifiers_drop_empty_and_duplicate_tokens() -> None:
    metadata = _scan("## @param (a) [array, , array,nullable] Items\n")

    assert metadata.parameters[0].modifiers == ["array", "nullable"]


def test_list_items_participate_in_path_heuristic() -> None:
    metadata = _scan(
        """
        hosts:
          ## @param First host name
          - name: example.local
        """
    )

    assert _names(metadata) == ["hosts.- name"]


def test_custom_comment_format_and_tags() -> None:
    config = GeneratorConfig(
        comments=CommentsConfig(format="#!"),
        tags=TagsConfig(param="@value", section="@group"),
    )
    metadata = _scan(
        """
        #! @group Core
        #! @value Replica count
        replicas: 2
        ## @param (ignored) Default tag is not recognised
        """,
        config,
    )

    assert [section.name for section in metadata.sections] == ["Core"]
    assert _names(metadata) == ["replicas"]


def test_tag_keywords_are_escaped() -> None:
    config = GeneratorConfig(tags=TagsConfig(param="@param+"))
    metadata = _scan(
        """
        ## @param+ (a) Literal plus
        ## @paramm (b) Not a tag
        """,
        config,
    )

    assert _names(metadata) == ["a"]


def test_crlf_line_endings() -> None:
    metadata = scan_metadata("## @param Port\r\nport: 8080\r\n")

    assert _names(metadata) == ["port"]
    assert metadata.parameters[0].description == "Port"


def test_scan_is_idempotent(values_builder) -> None:
    path = values_builder.write(
        """
        ## @section Image
        ## @descriptionStart
        ## Image settings
        ## @descriptionEnd
        image:
          ## @param Registry
          registry: docker.io
          ## @param (image.digest) Digest
          ## @skip pullSecrets
          pullSecrets: []
        """
    )

    first = parse_metadata_comments(path)
    second = parse_metadata_comments(path)

    assert asdict(first) == asdict(second)
    assert _names(first) == ["image.registry", "image.digest", "image.pullSecrets"]


def test_scanner_state_is_scoped_per_call() -> None:
    scanner = CommentTagScanner()
    scanner.scan("## @section One\n## @param Dangling\n")
    metadata = scanner.scan("key: value\n")

    assert metadata.sections == []
    assert metadata.parameters == []


def test_scan_state_projection_does_not_mutate_stacks() -> None:
    state = ScanState()
    state.push(parse_yaml_line("image:"))
    state.push(parse_yaml_line("  registry: docker.io"))

    projected = state.project(parse_yaml_line("  tag: latest"))

    assert projected == "image.tag"
    assert state.current_path == "image.registry"
    assert state.indent_stack == [0, 2]


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        parse_metadata_comments(tmp_path / "missing.yaml")
