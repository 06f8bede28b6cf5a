"""
Tests for the template host and the command line.

Run: python3 -m pytest test_viewer.py -v
"""

import io
import os
import sys
import shutil
import tempfile
import unittest
from unittest.mock import patch

# Ensure project root is on sys.path
_script_dir = os.path.dirname(os.path.abspath(__file__))
if _script_dir not in sys.path:
    sys.path.insert(0, _script_dir)

from PIL import Image


def _make_site(root):
    os.makedirs(os.path.join(root, 'assets'))
    os.makedirs(os.path.join(root, '_templates'))
    Image.new('RGB', (60, 30), (10, 200, 10)).save(os.path.join(root, 'assets', 'p.png'))
    with open(os.path.join(root, '_templates', 'page.html'), 'w') as f:
        f.write('<img src="{{ "/assets/p.png" | resize("30x30", "webp") }}">')


class TestTemplateHost(unittest.TestCase):

    def setUp(self):
        from config import ResizeConfig
        from viewer import create_app
        self.tmp = tempfile.mkdtemp()
        _make_site(self.tmp)
        cfg = ResizeConfig(config={'site': {'source': self.tmp, 'baseurl': '/blog'}})
        self.app = create_app(cfg)
        self.site = self.app.extensions['resize_site']

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def _render(self, source):
        with self.app.app_context():
            return self.app.jinja_env.from_string(source).render()

    def test_filter_returns_cache_url(self):
        url = self._render('{{ "/assets/p.png" | resize("30x30") }}')
        self.assertTrue(url.startswith('/blog/cache/resize/'), url)
        self.assertTrue(url.endswith('_30x30.png'), url)

    def test_filter_with_format(self):
        explicit = self._render('{{ "/assets/p.png" | resize("30x30", "webp") }}')
        embedded = self._render('{{ "/assets/p.png" | resize("30x30|webp") }}')
        self.assertEqual(explicit, embedded)
        self.assertTrue(explicit.endswith('.webp'))

    def test_template_file_render_publishes_artifact(self):
        from flask import render_template
        with self.app.test_request_context():
            html = render_template('page.html')
        self.assertIn('/blog/cache/resize/', html)
        self.assertEqual(len(self.site.static_files), 1)

        written = self.site.write(os.path.join(self.tmp, '_site'))
        self.assertEqual(len(written), 1)
        self.assertTrue(written[0].startswith(os.path.join(self.tmp, '_site', 'cache', 'resize')))

    def test_filter_error_propagates(self):
        from resize.errors import NotFoundError
        with self.assertRaises(NotFoundError):
            self._render('{{ "/assets/missing.png" | resize("30x30") }}')

    def test_serves_cached_file(self):
        url = self._render('{{ "/assets/p.png" | resize("30x30") }}')
        client = self.app.test_client()
        response = client.get('/cache/resize/' + url.rsplit('/', 1)[1])
        self.assertEqual(response.status_code, 200)
        self.assertIn('immutable', response.headers['Cache-Control'])
        self.assertEqual(response.mimetype, 'image/png')
        response.close()

    def test_unknown_cached_file(self):
        response = self.app.test_client().get('/cache/resize/nothing.png')
        self.assertEqual(response.status_code, 404)


class TestCommandLine(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.mkdtemp()
        _make_site(self.tmp)
        self.config = os.path.join(self.tmp, 'no_config.json')

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def _run(self, *argv):
        import resize_images
        with patch('sys.stdout', new_callable=io.StringIO) as out, \
                patch('sys.stderr', new_callable=io.StringIO) as err:
            code = resize_images.main(list(argv) + ['--root', self.tmp, '--config', self.config])
        return code, out.getvalue(), err.getvalue()

    def test_prints_url(self):
        code, out, _ = self._run('/assets/p.png', '30x30', '--base-url', '/docs')
        self.assertEqual(code, 0)
        self.assertTrue(out.strip().startswith('/docs/cache/resize/'))
        self.assertTrue(out.strip().endswith('_30x30.png'))

    def test_explicit_format(self):
        code, out, _ = self._run('/assets/p.png', '50%', '--format', 'jpeg')
        self.assertEqual(code, 0)
        self.assertTrue(out.strip().endswith('_50pctformatjpg.jpg'))

    def test_resize_error_exit_code(self):
        code, _, err = self._run('/assets/p.png', '30x30', '--format', 'gif')
        self.assertEqual(code, 1)
        self.assertIn('Supported: jpg, webp', err)

    def test_missing_arguments(self):
        with self.assertRaises(SystemExit) as ctx:
            self._run('/assets/p.png')
        self.assertEqual(ctx.exception.code, 2)

    def test_bad_config_exit_code(self):
        with open(self.config, 'w') as f:
            f.write('{broken')
        code, _, err = self._run('--info')
        self.assertEqual(code, 2)
        self.assertIn('Could not load config', err)

    def test_info_and_clear(self):
        self._run('/assets/p.png', '30x30')
        code, out, _ = self._run('--info')
        self.assertEqual(code, 0)
        self.assertIn('Files: 1', out)

        code, out, _ = self._run('--clear', '--yes')
        self.assertEqual(code, 0)
        self.assertIn('Deleted 1 files', out)
        self.assertEqual(os.listdir(os.path.join(self.tmp, 'cache', 'resize')), [])


if __name__ == '__main__':
    unittest.main()
