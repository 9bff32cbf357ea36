"""
Unit tests for repoprov.config module
"""
import unittest
import tempfile
import os
import shutil
import json
from pathlib import Path
from unittest.mock import patch

import toml
import yaml

from repoprov.config import (
    CLONE_SUFFIX,
    apply_env_overrides,
    get_config_path,
    get_default_config,
    load_config,
    load_runtime_config,
    merge_configs,
    resolve_workspace_path,
    save_config,
)


def _clean_environ():
    return {k: v for k, v in os.environ.items() if not k.startswith('REPOPROV_')}


class TestConfigManagement(unittest.TestCase):
    """Test configuration management functionality"""

    def setUp(self):
        """Set up an isolated HOME and working directory"""
        self.temp_dir = tempfile.mkdtemp()
        self.original_cwd = os.getcwd()
        os.chdir(self.temp_dir)
        self.env = patch.dict(os.environ, _clean_environ(), clear=True)
        self.env.start()
        os.environ['HOME'] = self.temp_dir

    def tearDown(self):
        self.env.stop()
        os.chdir(self.original_cwd)
        shutil.rmtree(self.temp_dir)

    def _write(self, name, text):
        config_dir = Path(self.temp_dir) / '.repoprov'
        config_dir.mkdir(exist_ok=True)
        path = config_dir / name
        path.write_text(text)
        return path

    def test_get_default_config(self):
        """Test default configuration structure"""
        config = get_default_config()

        for section in ('workspace', 'provisioning', 'validation', 'store', 'library', 'logging'):
            self.assertIn(section, config)

        self.assertEqual(config['workspace']['manifest'], 'stores/meta.json')
        self.assertEqual(config['store']['path'], 'stores/repositories.json')
        self.assertEqual(config['provisioning']['clone_depth'], 1)
        self.assertEqual(config['validation']['descriptor'], 'package.json')
        self.assertEqual(config['validation']['default_entry_point'], 'index.js')
        self.assertEqual(config['library']['required_directories'], ['types', 'services', 'tests'])

    def test_load_config_no_file(self):
        """No file anywhere gives the defaults"""
        self.assertEqual(load_config(), get_default_config())

    def test_default_path_when_nothing_exists(self):
        self.assertEqual(get_config_path(), Path(self.temp_dir) / '.repoprov' / 'config.json')

    def test_load_config_json_file(self):
        """Test loading config from JSON file"""
        self._write('config.json', json.dumps({
            'provisioning': {'max_concurrent_operations': 8},
            'logging': {'level': 'DEBUG'},
        }))

        config = load_config()

        self.assertEqual(config['provisioning']['max_concurrent_operations'], 8)
        # Untouched keys in the same section keep their defaults
        self.assertEqual(config['provisioning']['timeout_seconds'], 120)
        self.assertEqual(config['logging']['level'], 'DEBUG')

    def test_load_config_toml_file(self):
        self._write('config.toml', '[store]\nenabled = false\n')

        config = load_config()

        self.assertFalse(config['store']['enabled'])

    def test_load_config_yaml_file(self):
        self._write('config.yaml', 'validation:\n  required_directories: [types]\n')

        config = load_config()

        self.assertEqual(config['validation']['required_directories'], ['types'])

    def test_env_config_path_wins(self):
        self._write('config.json', json.dumps({'store': {'path': 'from-dir.json'}}))
        explicit = Path(self.temp_dir) / 'explicit.json'
        explicit.write_text(json.dumps({'store': {'path': 'from-env.json'}}))
        os.environ['REPOPROV_CONFIG'] = str(explicit)

        self.assertEqual(get_config_path(), explicit)
        self.assertEqual(load_config()['store']['path'], 'from-env.json')

    def test_invalid_file_falls_back_to_defaults(self):
        path = self._write('config.json', '{ invalid')

        with self.assertLogs('repoprov', level='ERROR'):
            config = load_config(path)

        self.assertEqual(config, get_default_config())

    def test_non_mapping_file_is_ignored(self):
        path = self._write('config.yaml', '- a\n- b\n')

        with self.assertLogs('repoprov', level='ERROR'):
            config = load_config(path)

        self.assertEqual(config, get_default_config())

    def test_clone_suffix_is_not_configurable(self):
        path = self._write('config.json', json.dumps({'workspace': {'clone_suffix': '-clone'}}))

        self.assertEqual(load_config(path)['workspace']['clone_suffix'], CLONE_SUFFIX)

    def test_save_config_formats(self):
        config = get_default_config()
        for name, reader in (
            ('out.json', json.loads),
            ('out.toml', toml.loads),
            ('out.yaml', yaml.safe_load),
        ):
            path = save_config(config, Path(self.temp_dir) / name)
            self.assertEqual(reader(path.read_text())['store'], config['store'])
            self.assertEqual(load_config(path)['library'], config['library'])

    def test_runtime_workspace_override(self):
        config = load_runtime_config(workspace='/srv/workspace')

        self.assertEqual(config['workspace']['root'], '/srv/workspace')
        self.assertEqual(resolve_workspace_path(config, 'stores'), Path('/srv/workspace/stores'))
        self.assertEqual(resolve_workspace_path(config, '/abs/path'), Path('/abs/path'))


class TestConfigMerging(unittest.TestCase):

    def test_merge_configs_nested(self):
        base = {'a': {'x': 1, 'y': 2}, 'b': 3}
        merged = merge_configs(base, {'a': {'y': 20}, 'c': 4})

        self.assertEqual(merged, {'a': {'x': 1, 'y': 20}, 'b': 3, 'c': 4})
        self.assertEqual(base['a']['y'], 2)

    def test_merge_replaces_non_dicts(self):
        merged = merge_configs({'a': {'x': 1}}, {'a': 'flat'})
        self.assertEqual(merged, {'a': 'flat'})


class TestEnvironmentOverrides(unittest.TestCase):

    @patch.dict(os.environ, {'REPOPROV_STORE_ENABLED': 'false'}, clear=True)
    def test_boolean_override(self):
        config = apply_env_overrides(get_default_config())
        self.assertFalse(config['store']['enabled'])

    @patch.dict(os.environ, {'REPOPROV_PROVISIONING_MAX_CONCURRENT_OPERATIONS': '16'}, clear=True)
    def test_multi_word_key(self):
        config = apply_env_overrides(get_default_config())
        self.assertEqual(config['provisioning']['max_concurrent_operations'], 16)

    @patch.dict(os.environ, {'REPOPROV_LIBRARY_PATH': 'vendor/fabric'}, clear=True)
    def test_string_override(self):
        config = apply_env_overrides(get_default_config())
        self.assertEqual(config['library']['path'], 'vendor/fabric')

    @patch.dict(os.environ, {'REPOPROV_NOT_A_SECTION': 'x', 'REPOPROV_CONFIG': '/nowhere'}, clear=True)
    def test_unknown_keys_ignored(self):
        config = apply_env_overrides(get_default_config())
        self.assertEqual(config, get_default_config())


if __name__ == '__main__':
    unittest.main()
