import unittest
from unittest import mock

from vehicle_service.notification import email


class TestPasswordResetMail(unittest.TestCase):

    @mock.patch.object(email, "send_email", return_value=True)
    def test_name_is_escaped_in_html(self, send_email):
        user = {"name": "<script>alert(1)</script>", "email": "user@garage.lk"}
        self.assertTrue(email.send_password_reset(user, "abc.def"))

        to_email, subject, body, html_body = send_email.call_args[0]
        self.assertEqual(to_email, "user@garage.lk")
        self.assertNotIn("<script>", html_body)
        self.assertIn("&lt;script&gt;alert(1)&lt;/script&gt;", html_body)
        self.assertIn("/reset-password/abc.def", html_body)
        self.assertIn("/reset-password/abc.def", body)

    @mock.patch.object(email, "get_settings")
    def test_without_smtp_nothing_is_sent(self, get_settings):
        get_settings.return_value.smtp_host = None
        with mock.patch.object(email.smtplib, "SMTP") as smtp:
            self.assertFalse(email.send_email("user@garage.lk", "Subject", "Body"))
        smtp.assert_not_called()


if __name__ == "__main__":
    unittest.main()
