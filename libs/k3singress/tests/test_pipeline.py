"""Tests for the k3singress manifest pipeline."""

import io
import json
import logging

import pytest

from conftest import FakeConverter
from k3singress.codec import dumps_documents, load_documents
from k3singress.errors import DecodeError, DelegateExecutionError
from k3singress.pipeline import build_final_manifests, run_pipeline, strip_ingresses


ARGS = ["--providers=ingress-nginx"]


class TestBuildFinalManifests:
    def test_drops_ingress_and_appends_converted(self, configmap, ingress, http_route):
        final = build_final_manifests([configmap, ingress], [http_route])
        assert final == [configmap, http_route]

    def test_conservation(self, configmap, ingress, service, http_route):
        other_ingress = dict(ingress, metadata={"name": "api"})
        original = [ingress, configmap, other_ingress, service]

        final = build_final_manifests(original, [http_route])

        assert final == [configmap, service, http_route]

    def test_does_not_modify_inputs(self, configmap, ingress, http_route):
        original = [configmap, ingress]
        converted = [http_route]

        build_final_manifests(original, converted)

        assert original == [configmap, ingress]
        assert converted == [http_route]

    def test_strip_ingresses_keeps_unknown_kinds(self):
        docs = [{"kind": "Ingress"}, {"metadata": {"name": "no-kind"}}, {"kind": 7}]
        assert strip_ingresses(docs) == [{"metadata": {"name": "no-kind"}}, {"kind": 7}]


class TestRunPipeline:
    def test_converts_ingress(self, configmap, ingress, http_route, fake_converter):
        sink = io.StringIO()

        result = run_pipeline(dumps_documents([configmap, ingress]), sink, fake_converter, ARGS)

        output = load_documents(sink.getvalue())
        assert [d["kind"] for d in output] == ["ConfigMap", "HTTPRoute"]
        assert output == [configmap, http_route]
        assert result.converter_invoked
        assert result.input_count == 2
        assert result.ingress_count == 1
        assert result.converted_count == 1
        assert result.output_count == 2

    def test_converter_receives_full_set_and_args(self, configmap, ingress, service, fake_converter):
        run_pipeline(
            dumps_documents([configmap, ingress, service]),
            io.StringIO(),
            fake_converter,
            ["print", "--providers", "ingress-nginx"],
        )

        assert fake_converter.calls == [
            ([configmap, ingress, service], ["print", "--providers", "ingress-nginx"]),
        ]

    def test_no_ingress_is_noop(self, configmap, service, http_route, fake_converter, caplog):
        docs = [configmap, service, dict(http_route)]
        sink = io.StringIO()

        with caplog.at_level(logging.WARNING):
            result = run_pipeline(dumps_documents(docs), sink, fake_converter, ARGS)

        assert load_documents(sink.getvalue()) == docs
        assert sink.getvalue() == dumps_documents(docs)
        assert fake_converter.calls == []
        assert not result.converter_invoked
        assert result.output_count == 3
        assert "no Ingress resources found in input" in caplog.text

    def test_empty_input(self, fake_converter):
        sink = io.StringIO()

        result = run_pipeline("---\n", sink, fake_converter, ARGS)

        assert sink.getvalue() == ""
        assert fake_converter.calls == []
        assert result.input_count == 0
        assert result.output_count == 0

    def test_malformed_input(self, fake_converter):
        sink = io.StringIO()

        with pytest.raises(DecodeError):
            run_pipeline("kind: ConfigMap\n---\nkind: Ingress\nspec: {rules: [\n", sink, fake_converter, ARGS)

        assert sink.getvalue() == ""
        assert fake_converter.calls == []

    def test_converter_failure(self, ingress):
        converter = FakeConverter(error=DelegateExecutionError("ingress2gateway failed", stderr="bad"))
        sink = io.StringIO()

        with pytest.raises(DelegateExecutionError):
            run_pipeline(dumps_documents([ingress]), sink, converter, ARGS)

        assert sink.getvalue() == ""

    def test_empty_conversion_still_drops_ingress(self, configmap, ingress):
        sink = io.StringIO()

        run_pipeline(dumps_documents([ingress, configmap]), sink, FakeConverter(output=[]), ARGS)

        assert load_documents(sink.getvalue()) == [configmap]

    def test_json_input(self, configmap, ingress, http_route, fake_converter):
        text = "\n".join(json.dumps(d) for d in [ingress, configmap])
        sink = io.StringIO()

        run_pipeline(text, sink, fake_converter, ARGS)

        assert load_documents(sink.getvalue()) == [configmap, http_route]
