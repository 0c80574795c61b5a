# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

from unittest import TestCase

from hckbookmarklet.services.chat.model_mapping import (
    MODEL_MAPPING,
    list_supported_models,
    map_model_id,
)


class ModelMappingTest(TestCase):
    def test_known_ids_map_to_openrouter_names(self):
        expected = {
            "gemini-1.5-flash": "google/gemini-flash-1.5",
            "meta-llama/Llama-3.3-70B-Instruct-Turbo": "meta-llama/llama-3.3-70b-instruct",
            "deepseek-reasoner": "deepseek/deepseek-r1",
            "deepseek-chat": "deepseek/deepseek-chat",
        }
        for caller_id, upstream_id in expected.items():
            self.assertEqual(map_model_id(caller_id), upstream_id)
        self.assertEqual(dict(MODEL_MAPPING), expected)

    def test_unknown_ids_pass_through(self):
        for model_id in ("openai/gpt-4o", "GEMINI-1.5-FLASH", "deepseek/deepseek-r1", ""):
            self.assertEqual(map_model_id(model_id), model_id)

    def test_mapping_is_read_only(self):
        with self.assertRaises(TypeError):
            MODEL_MAPPING["new-model"] = "x/y"  # type: ignore[index]

    def test_supported_models_have_labels(self):
        models = list_supported_models()
        self.assertEqual([m["id"] for m in models], list(MODEL_MAPPING))
        self.assertEqual(models[1]["label"], "Llama 3.3 70B")
        self.assertEqual(models[0]["upstream"], "google/gemini-flash-1.5")
