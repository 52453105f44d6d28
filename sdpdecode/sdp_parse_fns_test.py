#!/usr/bin/env python3
"""
sdp_parse_fns_test.py

This test suite verifies the built-in parse functions and the replacement of
parse functions, for a single parse or for the whole process.
"""

import unittest

from sdpdecode import SdpParseFns
from sdpdecode.SdpParseFns import (
    DEFAULT_CONFIG,
    ParserConfig,
    current_config,
    integer_in_range,
    parse_instant,
    parse_integer,
    parse_ip_address,
    parse_numeric_string,
    parse_port,
    parse_unsigned,
    reset_custom_parsers,
    use_custom_parsers,
)
from sdpdecode.SdpErrors import FieldDecodeError
from sdpdecode.SdpParser import parse

SDP_TEXT = (
    "v=0\n"
    "o=- 1443716955 1443716955 IN IP4 10.0.20.236\n"
    "s=st2110 0-1-0\n"
    "t=0 0\n"
    "m=audio 20000 RTP/AVP 97\n"
    "c=IN IP4 239.10.20.30/64\n"
    "a=rtpmap:97 L24/48000/2\n"
)


class TestSdpParseFns(unittest.TestCase):
    def test_integer(self):
        self.assertEqual(parse_integer("42"), 42)
        self.assertEqual(parse_integer("-1"), -1)
        for value in ("", "abc", "4 2", "1.5", "0x10"):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    parse_integer(value)

    def test_numeric_string(self):
        self.assertEqual(parse_numeric_string("2890844526"), "2890844526")
        self.assertEqual(parse_numeric_string("abc123"), "abc123")
        with self.assertRaises(ValueError):
            parse_numeric_string("1234-5678")

    def test_instant_keeps_large_values(self):
        self.assertEqual(parse_instant("3034423619"), 3034423619)
        self.assertEqual(parse_instant("123456789012345678901234567890"),
                         123456789012345678901234567890)
        with self.assertRaises(ValueError):
            parse_instant("7d")

    def test_port(self):
        self.assertEqual(parse_port("0"), 0)
        self.assertEqual(parse_port("65535"), 65535)
        for value in ("65536", "-1", "+80", "-0", "5004/2"):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    parse_port(value)

    def test_unsigned(self):
        self.assertEqual(parse_unsigned("128"), 128)
        self.assertEqual(parse_unsigned("0"), 0)
        for value in ("", "+5", "-5", "-0", "1.5"):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    parse_unsigned(value)

    def test_integer_in_range(self):
        percent = integer_in_range(0, 100)
        self.assertEqual(percent("100"), 100)
        with self.assertRaises(ValueError):
            percent("101")
        with self.assertRaises(ValueError):
            percent("+50")
        offset = integer_in_range(-12, 12)
        self.assertEqual(offset("-3"), -3)

    def test_ip_address(self):
        test_cases = [
            ("10.47.16.5", {"address": "10.47.16.5"}),
            ("224.2.17.12/127", {"address": "224.2.17.12", "ttl": 127}),
            ("224.2.1.1/127/3", {"address": "224.2.1.1", "ttl": 127, "address_count": 3}),
            ("10.47.16.5/0", {"address": "10.47.16.5", "ttl": 0}),
            ("ff0e::1", {"address": "ff0e::1"}),
            ("2001:db8::1", {"address": "2001:db8::1"}),
            ("ff15::101//3", {"address": "ff15::101", "address_count": 3}),
        ]
        for value, expected in test_cases:
            with self.subTest(value=value):
                self.assertEqual(parse_ip_address(value), expected)

    def test_invalid_ip_address(self):
        test_cases = [
            ("224.2.17.12", "multicast IPv4 address requires a TTL"),
            ("ff0e::1/127", "TTL not allowed for IPv6"),
            ("ff0e::1/127/3", "TTL not allowed for IPv6"),
            ("224.2.17.12/256", "outside of range"),
            ("224.2.17.12/ttl", "not an unsigned integer"),
            ("224.2.17.12/127/many", "not an unsigned integer"),
            ("224.2.1.1/127/+3", "not an unsigned integer"),
            ("224.2.17.12/1/2/3", "invalid connection-address"),
            ("host.example.com", "not an IPv4 or IPv6 address"),
        ]
        for value, message in test_cases:
            with self.subTest(value=value):
                with self.assertRaises(ValueError) as cm:
                    parse_ip_address(value)
                self.assertIn(message, str(cm.exception))


class TestSdpParserConfig(unittest.TestCase):
    def tearDown(self):
        reset_custom_parsers()

    def test_config_is_read_only(self):
        with self.assertRaises(TypeError):
            DEFAULT_CONFIG.parse_fns["port"] = str

    def test_with_parsers_returns_new_config(self):
        config = DEFAULT_CONFIG.with_parsers({"port": lambda value: value})
        self.assertIsNot(config, DEFAULT_CONFIG)
        self.assertIs(DEFAULT_CONFIG.parse_fn("port"), parse_port)
        self.assertEqual(config.parse_fn("port")("5004"), "5004")
        self.assertIs(config.parse_fn("integer"), parse_integer)

    def test_parse_functions_must_be_callable(self):
        with self.assertRaises(TypeError):
            ParserConfig({"port": 5004})

    def test_unknown_parse_function(self):
        with self.assertRaises(KeyError):
            DEFAULT_CONFIG.parse_fn("timestamp")

    def test_config_scoped_to_one_parse(self):
        config = DEFAULT_CONFIG.with_parsers({"port": lambda value: value})
        self.assertEqual(parse(SDP_TEXT, config=config)["media_descriptions"][0]["port"], "20000")
        self.assertEqual(parse(SDP_TEXT)["media_descriptions"][0]["port"], 20000)

    def test_use_custom_parsers_affects_all_later_parses(self):
        self.assertEqual(parse(SDP_TEXT)["media_descriptions"][0]["port"], 20000)

        use_custom_parsers({"port": lambda value: value})
        self.assertIs(current_config(), SdpParseFns.CURRENT_CONFIG)
        for _ in range(2):
            self.assertEqual(parse(SDP_TEXT)["media_descriptions"][0]["port"], "20000")

        # merged over the current parse functions, not over the defaults
        use_custom_parsers({"instant": lambda value: ("ntp", value)})
        description = parse(SDP_TEXT)
        self.assertEqual(description["media_descriptions"][0]["port"], "20000")
        self.assertEqual(description["timing"][0]["start_time"], ("ntp", "0"))

        reset_custom_parsers()
        self.assertIs(current_config(), DEFAULT_CONFIG)
        self.assertEqual(parse(SDP_TEXT)["media_descriptions"][0]["port"], 20000)

    def test_signed_port_and_bandwidth_are_rejected(self):
        test_cases = [
            ("signed port", SDP_TEXT.replace("m=audio 20000", "m=audio +20000"), "port", 5),
            ("negative zero port", SDP_TEXT.replace("m=audio 20000", "m=audio -0"), "port", 5),
            ("negative bandwidth", SDP_TEXT.replace("a=rtpmap", "b=AS:-5\na=rtpmap"), "bandwidth", 7),
            ("signed bandwidth", SDP_TEXT.replace("a=rtpmap", "b=AS:+128\na=rtpmap"), "bandwidth", 7),
        ]
        for name, text, field, line_number in test_cases:
            with self.subTest(name=name):
                with self.assertRaises(FieldDecodeError) as cm:
                    parse(text)
                self.assertEqual(cm.exception.field, field)
                self.assertEqual(cm.exception.line_number, line_number)
        description = parse(SDP_TEXT.replace("a=rtpmap", "b=AS:128\na=rtpmap"))
        self.assertEqual(description["media_descriptions"][0]["bandwidth"],
                         [{"bandwidth_type": "AS", "bandwidth": 128}])

    def test_custom_parser_failure_is_a_decode_error(self):
        def strict_port(value):
            raise ValueError("ports are not accepted")

        use_custom_parsers({"port": strict_port})
        with self.assertRaises(FieldDecodeError) as cm:
            parse(SDP_TEXT)
        self.assertEqual(cm.exception.field, "port")
        self.assertEqual(cm.exception.reason, "ports are not accepted")
        self.assertEqual(cm.exception.line_number, 5)


if __name__ == '__main__':
    unittest.main()
